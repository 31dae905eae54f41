"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden for testing
- Configuration is centralized

Everything here is built once by create_app and kept on app.state; the
dependencies only hand out those shared instances. Nothing is created
per request, so the storage backend chosen at startup never changes.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.site.store import SiteStore
from ..core.uploads.dispatcher import UploadDispatcher
from ..infrastructure.mongo.repositories.sites import SiteRepository


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_upload_dispatcher(request: Request) -> UploadDispatcher:
    """
    Provide the upload dispatcher.

    The dispatcher wraps the single asset writer (OSS or local disk)
    selected when the application was created.
    """
    return request.app.state.upload_dispatcher


def get_site_repository(request: Request) -> SiteRepository:
    """
    Provide SiteRepository bound to the shared database handle.

    pymongo clients pool connections internally, so the repository is
    cheap to share across requests.
    """
    return request.app.state.site_repository


def get_site_store(request: Request) -> SiteStore:
    """Provide the cached site store read by presentational components."""
    return request.app.state.site_store


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
UploadDispatcherDep = Annotated[UploadDispatcher, Depends(get_upload_dispatcher)]
SiteRepositoryDep = Annotated[SiteRepository, Depends(get_site_repository)]
SiteStoreDep = Annotated[SiteStore, Depends(get_site_store)]
