"""
Offline users export

Writes the same spreadsheet GET /api/export-users serves:
    python scripts/export_users.py [output.xlsx]
"""

import argparse
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from storefront.core.config import settings
from storefront.db.store import build_store
from storefront.services.export_service import export_users_xlsx

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def export(output: Path) -> int:
    store = build_store(settings)
    await store.connect()
    try:
        users = await store.list_users()
    finally:
        await store.close()

    if not users:
        logger.warning("No user data to export.")
        return 1

    output.write_bytes(export_users_xlsx(users))
    logger.info(f"✅ Exported {len(users)} users to {output}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Export users to an .xlsx spreadsheet")
    parser.add_argument("output", nargs="?", default=settings.EXPORT_FILENAME, type=Path)
    args = parser.parse_args()
    sys.exit(asyncio.run(export(args.output)))


if __name__ == "__main__":
    main()
