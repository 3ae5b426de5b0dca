"""
app/db/indexes.py

Purpose: Database index management

- Unique index on userId (one profile-share record per user)
- Idempotent, run on every startup
"""

from pymongo import ASCENDING

from app.db.mongo import get_profile_shares_collection
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes():
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        profile_shares = get_profile_shares_collection()

        logger.info("Creating database indexes...")

        await profile_shares.create_index(
            [("userId", ASCENDING)],
            unique=True,
            name="userId_unique"
        )
        logger.debug("Created unique index on profile_shares.userId")

        indexes = await profile_shares.index_information()
        logger.info(f"Index summary: profile_shares={len(indexes)}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_all_indexes():
    """
    Drops all custom indexes (keeps _id index).
    Only for maintenance/migration.
    """
    try:
        profile_shares = get_profile_shares_collection()
        logger.warning("Dropping all database indexes...")
        await profile_shares.drop_indexes()
        logger.info("All indexes dropped successfully")

    except Exception as e:
        logger.error(f"Failed to drop indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection

    async def main():
        await connect_to_mongo()
        await create_indexes()
        await close_mongo_connection()

    asyncio.run(main())
