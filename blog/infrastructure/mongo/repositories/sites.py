"""
MongoDB repository for the site configuration document.

The sites collection holds a single document describing the blog (title,
SEO fields, author, social links, favicon, ad settings). This repository
only reads it; editing the document is somebody else's job.
"""

import logging
from typing import Any, Optional, Protocol

from blog.core.site.models import SiteConfig

logger = logging.getLogger(__name__)

SITES_COLLECTION = "sites"


class Database(Protocol):
    """
    Protocol for MongoDB databases.

    Using a protocol means tests can provide MockDatabase without
    importing pymongo.
    """

    def __getitem__(self, name: str) -> Any: ...
    def command(self, command: str) -> Any: ...


class SiteRepositoryError(Exception):
    """Raised when the site document cannot be read."""
    pass


class SiteRepository:
    """Read access to the single site configuration document."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def get_site_document(self) -> Optional[dict[str, Any]]:
        """Raw document without the Mongo _id, or None if the collection is empty."""
        try:
            document = self._database[SITES_COLLECTION].find_one({})
        except Exception as e:
            logger.error(
                "Failed to load site document",
                extra={"collection": SITES_COLLECTION, "error": str(e)}
            )
            raise SiteRepositoryError(f"Failed to load site configuration: {e}")

        if document is None:
            logger.debug("No site document found", extra={"collection": SITES_COLLECTION})
            return None

        document.pop("_id", None)
        return document

    def get_site(self) -> Optional[SiteConfig]:
        document = self.get_site_document()
        if document is None:
            return None
        return SiteConfig.from_document(document)

    def ping(self) -> bool:
        """True when the database answers a ping."""
        try:
            self._database.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed", extra={"error": str(e)})
            return False
