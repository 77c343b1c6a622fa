"""
MongoDB Connection Utility

MongoDB stores everything the site serves:
- countries, universities, courses (study-abroad catalogue)
- blog posts and blog categories
- leads captured from enquiry forms

The client is owned by a MongoStore that the app constructs once and hands
to routes through a dependency. Connecting is lazy and idempotent: the first
request that needs the database creates the client and the indexes, later
calls reuse them.
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

logger = logging.getLogger(__name__)


# Collection name constants (avoid typos)
COLLECTIONS = {
    "countries": "countries",
    "universities": "universities",
    "courses": "courses",
    "blog_posts": "blogposts",
    "blog_categories": "blogcategories",
    "leads": "leads",
}


class MongoStore:
    """
    Owns the MongoClient for one application instance.

    Args:
        uri: MongoDB connection string
        db_name: database holding the CareerHQ collections
        client_factory: callable building the client (tests pass mongomock.MongoClient)
    """

    def __init__(self, uri: str, db_name: str, client_factory: Callable[..., MongoClient] = MongoClient):
        self.uri = uri
        self.db_name = db_name
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None
        self._indexes_ready = False

    def ensure_connected(self) -> Database:
        """Create the client and indexes if not already done."""
        if self._db is None:
            self._client = self._client_factory(self.uri)
            self._db = self._client[self.db_name]
            logger.info("MongoDB client created for database '%s'", self.db_name)
        if not self._indexes_ready:
            init_mongo_indexes(self._db)
            self._indexes_ready = True
        return self._db

    def collection(self, key: str) -> Collection:
        """Get a collection by its COLLECTIONS key."""
        return self.ensure_connected()[COLLECTIONS[key]]

    def ping(self) -> bool:
        """
        Test if MongoDB is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            self.ensure_connected()
            self._client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB connection failed: %s", e)
            return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
        self._indexes_ready = False


def init_mongo_indexes(db: Database) -> None:
    """Create indexes for the lookups the API performs."""
    db[COLLECTIONS["countries"]].create_index("name", unique=True)
    db[COLLECTIONS["countries"]].create_index("slug")
    db[COLLECTIONS["countries"]].create_index("code")

    db[COLLECTIONS["universities"]].create_index("slug")
    db[COLLECTIONS["universities"]].create_index([("countryId", ASCENDING), ("name", ASCENDING)])

    db[COLLECTIONS["courses"]].create_index("slug")
    db[COLLECTIONS["courses"]].create_index([
        ("universityId", ASCENDING),
        ("programName", ASCENDING),
        ("studyLevel", ASCENDING),
    ])
    db[COLLECTIONS["courses"]].create_index([("countryId", ASCENDING), ("studyLevel", ASCENDING)])

    db[COLLECTIONS["blog_posts"]].create_index("category")
    db[COLLECTIONS["blog_posts"]].create_index([("createdAt", DESCENDING)])

    db[COLLECTIONS["leads"]].create_index([("status", ASCENDING), ("createdAt", DESCENDING)])

    logger.info("MongoDB indexes created successfully")


def get_store(request: Request) -> MongoStore:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/countries")
        def list_countries(store: MongoStore = Depends(get_store)):
            ...
    """
    store: MongoStore = request.app.state.store
    store.ensure_connected()
    return store
