"""
MongoDB Connection Utility

MongoDB stores:
- applicants: one document per internship applicant (camelCase keys)
- counters: per-year sequence for registration numbers
"""
import logging
from functools import lru_cache

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from ats.core.config import get_settings

logger = logging.getLogger(__name__)

# Collection name constants (avoid typos)
COLLECTIONS = {
    "applicants": "applicants",
    "counters": "counters",
}


@lru_cache()
def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (connection pooling handled internally by pymongo)"""
    return MongoClient(get_settings().mongodb_uri, serverSelectionTimeoutMS=5000)


def get_mongo_db() -> Database:
    return get_mongo_client()[get_settings().mongodb_db]


def get_collection(name: str) -> Collection:
    return get_mongo_db()[name]


def check_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        get_mongo_client().admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB connection failed: {e}")
        return False


def init_mongo_indexes() -> None:
    """
    Create indexes for the applicant collection.
    Call this once during app startup.
    """
    applicants = get_collection(COLLECTIONS["applicants"])
    applicants.create_index("email", unique=True)
    applicants.create_index("registrationNumber", unique=True, sparse=True)
    applicants.create_index([("status", ASCENDING), ("uploadDate", ASCENDING)])

    logger.info("MongoDB indexes created successfully")
