import os
import yaml
from sparksave.core.domain.settings import SystemSettings

# Environment variable -> settings field. Env vars take precedence over the file.
ENV_OVERRIDES = {
    "OPENROUTER_API_KEY": "openrouter_api_key",
    "OPENROUTER_BASE_URL": "openrouter_base_url",
    "OPENROUTER_MODEL": "openrouter_model",
    "MONGO_URL": "mongo_url",
    "MONGO_DB_NAME": "mongo_db_name",
    "SPARKSAVE_PLANS_FILE": "plans_file",
    "SPARKSAVE_PLAN_CATALOG": "plan_catalog_type",
    "SPARKSAVE_MEMORY_BANK": "memory_bank_type",
}

def load_settings(path: str | None = None) -> SystemSettings:
    """
    Load system settings from a YAML file.
    Falls back to environment variables if file doesn't exist or is not provided.

    Args:
        path: Path to config.yaml. Defaults to SPARKSAVE_CONFIG_FILE env var or "config.yaml".
    """
    if path is None:
        path = os.getenv("SPARKSAVE_CONFIG_FILE", "config.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}")

    # Env vars > File > Defaults
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            config_data[field_name] = value

    return SystemSettings(**config_data)
