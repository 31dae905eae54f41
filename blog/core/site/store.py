"""
Cached site state for presentational components.

The store is populated separately from page rendering (once at startup,
and again whenever refresh is called). Components read a snapshot and
render a placeholder while the store is loading or empty.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .metadata import DEFAULT_AUTHOR_NAME
from .models import SiteConfig

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR_DESCRIPTION = "一个热爱生活和分享技术的程序员"


class SiteSource(Protocol):
    """Anything that can load the site document (SiteRepository in production)."""

    def get_site(self) -> Optional[SiteConfig]: ...


@dataclass(frozen=True)
class SiteState:
    site: Optional[SiteConfig] = None
    loading: bool = True


class SiteStore:
    """
    Holds the most recently loaded site document.

    State is replaced as a whole, never mutated in place, so a reader
    always sees a consistent (site, loading) pair.
    """

    def __init__(self) -> None:
        self._state = SiteState()

    def snapshot(self) -> SiteState:
        return self._state

    def set_site(self, site: Optional[SiteConfig]) -> None:
        self._state = SiteState(site=site, loading=False)

    def refresh(self, source: SiteSource) -> SiteState:
        """
        Reload the site document from source.

        A failed load is logged and leaves the store empty but no longer
        loading, so components fall back to their placeholder.
        """
        self._state = SiteState(site=self._state.site, loading=True)

        try:
            site = source.get_site()
        except Exception as e:
            logger.error(
                "Failed to load site configuration into store",
                extra={"error": str(e)},
            )
            self._state = SiteState(site=None, loading=False)
        else:
            self._state = SiteState(site=site, loading=False)
            logger.debug("Site store refreshed", extra={"found": site is not None})

        return self._state


@dataclass(frozen=True)
class AuthorIntroView:
    """What the author intro component renders."""
    show_placeholder: bool
    name: str = DEFAULT_AUTHOR_NAME
    description: str = DEFAULT_AUTHOR_DESCRIPTION


def author_intro_view(state: SiteState) -> AuthorIntroView:
    """Name and description default independently of each other."""
    if state.loading or state.site is None:
        return AuthorIntroView(show_placeholder=True)

    author = state.site.author
    return AuthorIntroView(
        show_placeholder=False,
        name=author.name or DEFAULT_AUTHOR_NAME,
        description=author.description or DEFAULT_AUTHOR_DESCRIPTION,
    )
