import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from staybook.core.config import MONGODB_URL, DATABASE_NAME

logger = logging.getLogger(__name__)


class MongoDB:
    client: AsyncIOMotorClient = None
    db = None

mongodb = MongoDB()

async def connect_to_mongo():
    mongodb.client = AsyncIOMotorClient(MONGODB_URL)
    mongodb.db = mongodb.client[DATABASE_NAME]

    # Test connection
    await mongodb.client.admin.command("ping")
    await ensure_indexes()
    logger.info("MongoDB connected to %s", DATABASE_NAME)

async def close_mongo_connection():
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("MongoDB disconnected")

async def ensure_indexes():
    """Create the indexes the booking pipeline relies on.

    The unique index on ``orders.session.id`` is what guarantees at most one
    order per checkout session when confirmations race; it must exist before
    the app serves ``/booking/confirm``.
    """
    await mongodb.db.orders.create_index([("session.id", ASCENDING)], unique=True, name="uniq_session_id")
    await mongodb.db.orders.create_index([("ordered_by", ASCENDING), ("created_at", ASCENDING)])
    await mongodb.db.users.create_index([("id", ASCENDING)], unique=True)
    await mongodb.db.users.create_index([("email", ASCENDING)], unique=True)
    await mongodb.db.listings.create_index([("id", ASCENDING)], unique=True)
    await mongodb.db.listings.create_index([("posted_by", ASCENDING)])
