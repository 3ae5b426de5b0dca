"""
Database initialization script

Run once to create the profile_shares collection and its indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
import os
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
import logging

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


MONGODB_URL = os.getenv("MONGODB_URL")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME")

if not MONGODB_URL or not MONGODB_DB_NAME:
    raise ValueError("MONGODB_URL and MONGODB_DB_NAME must be set in .env file")


async def create_indexes():
    """Create the unique userId index and report existing documents."""

    logger.info(f"Connecting to MongoDB: {MONGODB_DB_NAME}")
    client = AsyncIOMotorClient(MONGODB_URL)
    db = client[MONGODB_DB_NAME]

    try:
        await client.admin.command('ping')
        logger.info("Connected successfully")

        profile_shares = db.profile_shares

        duplicates = await profile_shares.aggregate([
            {"$group": {"_id": "$userId", "count": {"$sum": 1}}},
            {"$match": {"count": {"$gt": 1}}},
        ]).to_list(length=None)

        if duplicates:
            logger.error(
                f"{len(duplicates)} users own more than one profile_shares document; "
                "resolve them before creating the unique index"
            )
            for entry in duplicates[:10]:
                logger.error(f"  userId={entry['_id']} documents={entry['count']}")
            return

        await profile_shares.create_index(
            [("userId", ASCENDING)],
            unique=True,
            name="userId_unique"
        )
        logger.info("  userId index created (unique)")

        total = await profile_shares.count_documents({})
        with_logo = await profile_shares.count_documents({"profileData.logo": {"$nin": ["", None]}})
        logger.info(f"profile_shares: {total} documents, {with_logo} with a logo")

    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(create_indexes())
