"""
Database module - MongoDB storage client.
"""
from careerhq.db.mongodb import MongoStore, get_store, COLLECTIONS

__all__ = [
    "MongoStore",
    "get_store",
    "COLLECTIONS",
]
