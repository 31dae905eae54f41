"""
Site configuration endpoint.

Returns the site document the client-side store is populated from, or
null when the sites collection is empty.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter

from ..dependencies import SiteRepositoryDep, SiteStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    summary="Get site configuration",
    description="Title, SEO fields, author, social links, favicon and ad settings",
)
def get_site(repository: SiteRepositoryDep) -> Optional[dict[str, Any]]:
    site = repository.get_site()
    if site is None:
        return None
    return site.to_dict()


@router.post(
    "/refresh",
    summary="Reload cached site configuration",
    description="Reloads the site document into the server-side store used by page components",
)
def refresh_site(repository: SiteRepositoryDep, store: SiteStoreDep) -> dict[str, Any]:
    state = store.refresh(repository)
    logger.info("Site store refreshed on request", extra={"found": state.site is not None})
    return {"loaded": state.site is not None}
