"""
Store bootstrap

Creates the JSON store file (or the Mongo indexes when STORE_BACKEND=mongo)
and reports what is already stored:
    python scripts/init_db.py
"""

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))
load_dotenv()

from storefront.core.config import settings
from storefront.db.store import build_store

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("init_db")


async def bootstrap() -> None:
    store = build_store(settings)
    logger.info(f"Opening {settings.STORE_BACKEND} store ({type(store).__name__})")

    await store.connect()
    try:
        users = await store.list_users()
        total_balance = sum((user.balance for user in users), start=0)
        logger.info(f"✅ Store ready: {len(users)} users, total balance {total_balance}")
    finally:
        await store.close()


if __name__ == "__main__":
    asyncio.run(bootstrap())
