"""
Repository pattern implementations for MongoDB.

Repositories translate between documents and domain models.
"""

from .sites import SiteRepository, SiteRepositoryError

__all__ = ["SiteRepository", "SiteRepositoryError"]
