"""
MongoDB integration for the site configuration document.

Includes mock mode for local development without a database server.
"""

from .client import MongoConfig, MockMongoClient, create_mongo_client

__all__ = ["MongoConfig", "MockMongoClient", "create_mongo_client"]
