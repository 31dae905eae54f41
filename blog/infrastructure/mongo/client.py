"""
MongoDB client management.

Provides a client factory for the database holding the sites collection.
Includes mock mode with in-memory collections for local development.

Using the repository pattern means most code never touches this module
directly - it goes through SiteRepository which handles the translation
between documents and domain models.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


class MongoConnectionError(Exception):
    """Raised when a MongoDB client cannot be created."""
    pass


@dataclass(frozen=True)
class MongoConfig:
    """Configuration for the MongoDB connection."""
    uri: str
    database: str = "blog"
    server_selection_timeout_ms: int = 5000


def get_mongo_client(config: MongoConfig) -> Any:
    """
    Create a pymongo client.

    pymongo connects lazily, so this doesn't touch the network; the first
    query (or a ping) does. The client is thread-safe and meant to be
    shared for the whole process.
    """
    try:
        from pymongo import MongoClient
        from pymongo.errors import ConfigurationError
    except ImportError:
        raise ImportError(
            "pymongo is required. Install with: pip install pymongo"
        )

    try:
        client = MongoClient(
            config.uri,
            serverSelectionTimeoutMS=config.server_selection_timeout_ms,
        )
    except ConfigurationError as e:
        logger.error(
            "Invalid MongoDB configuration",
            extra={"error": str(e)}
        )
        raise MongoConnectionError(f"Invalid MongoDB configuration: {e}")

    logger.info(
        "Created MongoDB client",
        extra={"database": config.database}
    )

    return client


# ---------------------------------------------------------------------------
# Mock Client for Local Development
# ---------------------------------------------------------------------------

class MockCollection:
    """
    In-memory collection.

    Implements just enough of the pymongo Collection interface for
    SiteRepository and for seeding data in tests. Filters match on
    top-level equality only.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._documents: list[dict] = []

    def _matches(self, document: dict, filter: Optional[dict]) -> bool:
        if not filter:
            return True
        return all(document.get(key) == value for key, value in filter.items())

    def find_one(self, filter: Optional[dict] = None) -> Optional[dict]:
        for document in self._documents:
            if self._matches(document, filter):
                return copy.deepcopy(document)
        return None

    def insert_one(self, document: dict) -> None:
        self._documents.append(copy.deepcopy(document))

    def delete_many(self, filter: Optional[dict] = None) -> int:
        kept = [d for d in self._documents if not self._matches(d, filter)]
        deleted = len(self._documents) - len(kept)
        self._documents = kept
        return deleted


class MockDatabase:
    """In-memory database; collections are created on first access."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._collections: dict[str, MockCollection] = {}

    def __getitem__(self, name: str) -> MockCollection:
        if name not in self._collections:
            self._collections[name] = MockCollection(name)
        return self._collections[name]

    def command(self, command: str) -> dict:
        """Answer ping like a healthy server."""
        return {"ok": 1.0}


class MockMongoClient:
    """
    Mock MongoDB client for local development.

    Not suitable for production, but perfect for:
    - Local development
    - Unit tests
    - CI/CD environments
    """

    def __init__(self) -> None:
        self._databases: dict[str, MockDatabase] = {}
        logger.info("Initialized mock MongoDB client (in-memory)")

    def __getitem__(self, name: str) -> MockDatabase:
        if name not in self._databases:
            self._databases[name] = MockDatabase(name)
        return self._databases[name]

    def close(self) -> None:
        """Close client (no-op for mock)."""
        logger.debug("Mock MongoDB client close")


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_mongo_client(
    config: Optional[MongoConfig] = None,
    mock_mode: bool = False,
) -> Any:
    """
    Create MongoDB client based on configuration.

    Args:
        config: MongoDB configuration (required if not mock_mode)
        mock_mode: If True, return an in-memory client

    Returns:
        pymongo MongoClient or MockMongoClient
    """
    if mock_mode:
        return MockMongoClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return get_mongo_client(config)
