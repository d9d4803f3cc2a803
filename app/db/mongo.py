import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from app.core.config import settings

logger = logging.getLogger(__name__)

class MongoDatabase:
    """MongoDB connection manager."""
    
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]
    
    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    db = mongodb.db

    await db["admins"].create_index("username", unique=True)
    await db["members"].create_index("user_id", unique=True)

    # Month filters use a date prefix regex
    await db["expenses"].create_index("date")
    await db["expenses"].create_index([("date", 1), ("status", 1)])
    await db["expenses"].create_index([("paid_by", 1), ("date", 1)])

    # One regular meal per member per type per day
    await db["meals"].create_index(
        [("date", 1), ("member_id", 1), ("meal_type", 1)], unique=True
    )
    await db["guest_meals"].create_index([("date", 1), ("member_id", 1)])

    # First claim on a date wins
    await db["market_requests"].create_index("date", unique=True)

    await db["monthly_summaries"].create_index(
        [("month", 1), ("member_id", 1)], unique=True
    )
    await db["notifications"].create_index([("user_id", 1), ("is_read", 1)])
    await db["notifications"].create_index("type")
    await db["settings"].create_index("key", unique=True)
    await db["monthly_reports"].create_index("month", unique=True)
    await db["cooking_records"].create_index([("member_id", 1), ("date", 1)], unique=True)
    await db["manager_records"].create_index([("member_id", 1), ("date", 1)], unique=True)
    logger.debug("MongoDB indexes ensured")
