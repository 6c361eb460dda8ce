"""
Seed Plans Script for SparkSave.
Copies a YAML plan catalog into the MongoDB plan collection.
"""
import argparse
import asyncio

from sparksave.adapters.config.settings_loader import load_settings
from sparksave.adapters.stores.mongo_store import MongoPlanCatalog
from sparksave.adapters.stores.yaml_catalog import YamlPlanCatalog


async def seed_plans(plans_file: str | None = None, state: str | None = None):
    """
    Upsert every plan from the YAML catalog into MongoDB.
    """
    settings = load_settings()
    source = YamlPlanCatalog(plans_file or settings.plans_file)
    target = MongoPlanCatalog(settings)

    plans = await source.list_plans(state=state)
    print(f"Seeding {len(plans)} plans from {source.catalog_path} into {settings.mongo_db_name}...")

    try:
        written = await target.save_plans(plans)
    finally:
        await target.close()
    print(f"Successfully seeded {written} plans.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--plans-file", help="YAML catalog to read (defaults to settings.plans_file)")
    parser.add_argument("--state", help="Only seed plans offered in this state")
    args = parser.parse_args()
    asyncio.run(seed_plans(args.plans_file, args.state))
