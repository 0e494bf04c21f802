import logging
from pymongo import MongoClient
from pymongo.database import Database

from vetshop.core.config import settings

logger = logging.getLogger(__name__)

# Global MongoDB client
_client: MongoClient = None
_database: Database = None


def connect_to_mongo() -> Database:
    """Connect to MongoDB."""
    global _client, _database
    if _database is None:
        _client = MongoClient(settings.MONGODB_URI)
        _database = _client[settings.MONGODB_DB_NAME]
        logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")
    return _database


def close_mongo_connection():
    """Close MongoDB connection."""
    global _client, _database
    if _client:
        _client.close()
        _client = None
        _database = None
        logger.info("Closed MongoDB connection")


def get_database() -> Database:
    """Get MongoDB database instance."""
    return _database
