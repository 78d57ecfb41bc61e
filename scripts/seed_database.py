# scripts/seed_database.py
#  to run the script, run the following command:
#  python scripts/seed_database.py [--codes-only | --patients-only]

"""
Database Seeding Script
Creates missing tables, then loads the common ICD-10 codes and the demo patients.
Safe to run more than once.
"""
import argparse
import asyncio
import logging.config
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from config.appconfig import settings

logging.config.dictConfig(settings.LOGGING_CONFIG)

from app.database.connection import AsyncSessionLocal, engine, init_models
from app.icd10system.icd10_service import icd10_service
from app.system_services.patient_services import seed_demo_patients

logger = logging.getLogger(__name__)


async def seed(codes: bool = True, patients: bool = True) -> None:
    await init_models()
    logger.info("✓ Tables ready")

    async with AsyncSessionLocal() as session:
        if codes:
            seeded, skipped = await icd10_service.seed_common_codes(session)
            logger.info(f"🩺 ICD-10 codes: {seeded} seeded, {skipped} skipped")
        if patients:
            created = await seed_demo_patients(session)
            logger.info(f"🧑‍⚕️ Demo patients: {len(created)} seeded")

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Afyascribe database")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--codes-only", action="store_true", help="Only seed ICD-10 codes")
    group.add_argument("--patients-only", action="store_true", help="Only seed demo patients")
    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("   AFYASCRIBE - DATABASE SEED")
    print("=" * 60 + "\n")

    asyncio.run(seed(codes=not args.patients_only, patients=not args.codes_only))

    print("\n" + "=" * 60)
    print("   ✅ SUCCESS - Database seeded")
    print("=" * 60 + "\n")
