"""
Database module - MongoDB connection and collection names.
"""
from careerhub.db.mongodb import COLLECTIONS, get_collection, get_mongo_db, test_mongo_connection

__all__ = ["COLLECTIONS", "get_collection", "get_mongo_db", "test_mongo_connection"]
