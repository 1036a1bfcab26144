import logging
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from ..config import (
    CANDIDATES_COLLECTION_NAME,
    MONGO_DB_NAME,
    MONGO_URI,
    REVIEWS_COLLECTION_NAME,
    VOTERS_COLLECTION_NAME,
    VOTES_COLLECTION_NAME,
)

logger = logging.getLogger(__name__)


class MongoConnector:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super(MongoConnector, cls).__new__(cls)
            try:
                instance.client = MongoClient(MONGO_URI)
                instance.client.server_info()
                instance.db = instance.client[MONGO_DB_NAME]
                ensure_indexes(instance.db)
                logger.info(f"Connected to MongoDB: {MONGO_DB_NAME}")
            except Exception as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise
            cls._instance = instance
        return cls._instance

    @classmethod
    def use_database(cls, db: Optional[Database]):
        """Point the connector at an already-open database (or reset it with None)."""
        if db is None:
            cls._instance = None
            return
        instance = super(MongoConnector, cls).__new__(cls)
        instance.client = getattr(db, "client", None)
        instance.db = db
        ensure_indexes(db)
        cls._instance = instance


def ensure_indexes(db: Database):
    voters = db[VOTERS_COLLECTION_NAME]
    voters.create_index("documentId", unique=True)
    voters.create_index("email", unique=True, sparse=True)

    # One vote per voter, enforced by the store as well as by the engine
    db[VOTES_COLLECTION_NAME].create_index("voterId", unique=True)
    db[VOTES_COLLECTION_NAME].create_index([("candidateId", ASCENDING)])

    db[CANDIDATES_COLLECTION_NAME].create_index([("status", ASCENDING)])
    db[REVIEWS_COLLECTION_NAME].create_index([("status", ASCENDING)])


def get_database() -> Database:
    return MongoConnector().db


def voter_collection():
    return get_database()[VOTERS_COLLECTION_NAME]


def candidate_collection():
    return get_database()[CANDIDATES_COLLECTION_NAME]


def vote_collection():
    return get_database()[VOTES_COLLECTION_NAME]


def review_collection():
    return get_database()[REVIEWS_COLLECTION_NAME]
