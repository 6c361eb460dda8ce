import pytest

from sparksave.core.domain.settings import SystemSettings
from sparksave.adapters.config.settings_loader import load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENROUTER_API_KEY", "MONGO_URL", "SPARKSAVE_PLANS_FILE", "SPARKSAVE_MEMORY_BANK"):
        monkeypatch.delenv(name, raising=False)


def test_system_settings_defaults():
    settings = SystemSettings()
    assert settings.plan_catalog_type == "yaml"
    assert settings.memory_bank_type == "none"
    assert settings.plans_file == "plans.yaml"
    assert settings.mongo_url == "mongodb://localhost:27017"
    assert settings.default_top_n == 3
    assert settings.explainer_max_attempts == 2
    assert settings.explanations_enabled is False


def test_explanations_enabled_with_api_key():
    assert SystemSettings(openrouter_api_key="sk-test").explanations_enabled is True


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
    monkeypatch.setenv("MONGO_URL", "mongodb://custom:27017")
    monkeypatch.setenv("SPARKSAVE_MEMORY_BANK", "mongo")

    settings = load_settings(path="non_existent.yaml")

    assert settings.openrouter_api_key == "sk-env"
    assert settings.mongo_url == "mongodb://custom:27017"
    assert settings.memory_bank_type == "mongo"


def test_load_settings_from_file(tmp_path):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
plans_file: "custom_plans.yaml"
default_top_n: 5
explainer_backoff_seconds: 0.5
    """)

    settings = load_settings(path=str(config_file))

    assert settings.plans_file == "custom_plans.yaml"
    assert settings.default_top_n == 5
    assert settings.explainer_backoff_seconds == 0.5
    # Defaults preserved
    assert settings.mongo_db_name == "sparksave"


def test_load_settings_env_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text('plans_file: "file_plans.yaml"')

    monkeypatch.setenv("SPARKSAVE_PLANS_FILE", "env_plans.yaml")

    settings = load_settings(path=str(config_file))

    # Env var should hold precedence
    assert settings.plans_file == "env_plans.yaml"


def test_load_settings_corrupt_file(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("plans_file: [unclosed")

    with pytest.raises(RuntimeError, match="Failed to load configuration"):
        load_settings(path=str(config_file))
