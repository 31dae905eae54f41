"""
Site configuration, page metadata and the cached site store.
"""

from .metadata import (
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    PageMetadata,
    build_page_metadata,
    website_json_ld,
)
from .models import AuthorInfo, SeoSettings, SiteConfig, SocialLinks
from .store import AuthorIntroView, SiteState, SiteStore, author_intro_view

__all__ = [
    "DEFAULT_DESCRIPTION",
    "DEFAULT_TITLE",
    "PageMetadata",
    "build_page_metadata",
    "website_json_ld",
    "AuthorInfo",
    "SeoSettings",
    "SiteConfig",
    "SocialLinks",
    "AuthorIntroView",
    "SiteState",
    "SiteStore",
    "author_intro_view",
]
