"""
Page metadata (title, SEO tags, icons, JSON-LD) for server-rendered pages.

Every field falls back to a fixed default on its own, so a missing site
document or a half-filled one still yields complete metadata with no
None values.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .models import SiteConfig

DEFAULT_TITLE = "个人博客"
DEFAULT_DESCRIPTION = "分享技术与生活"
DEFAULT_FAVICON = "/favicon.ico"
DEFAULT_AUTHOR_NAME = "博主"


@dataclass(frozen=True)
class PageMetadata:
    """Everything the layout template puts in <head>."""
    title: str
    description: str
    keywords: list[str] = field(default_factory=list)
    icons: dict[str, str] = field(default_factory=dict)
    open_graph: dict[str, str] = field(default_factory=dict)
    other: dict[str, str] = field(default_factory=dict)

    @property
    def keywords_content(self) -> str:
        return ", ".join(self.keywords)

    @property
    def json_ld(self) -> Optional[str]:
        return self.other.get("script:ld+json")

    @property
    def meta_tags(self) -> dict[str, str]:
        """Entries of `other` that render as plain <meta name=...> tags."""
        return {
            name: content
            for name, content in self.other.items()
            if not name.startswith("script:")
        }


def organization_json_ld(site: Optional[SiteConfig], site_url: str) -> dict[str, Any]:
    """schema.org Organization describing the site owner."""
    site_url = site_url.rstrip("/")
    same_as = site.social.all_links if site else []

    return {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": (site.title if site else None) or DEFAULT_TITLE,
        "url": site_url,
        "logo": (site.favicon if site else None) or f"{site_url}/avatar.png",
        "sameAs": same_as,
    }


def website_json_ld(site_url: str) -> dict[str, Any]:
    """schema.org WebSite block rendered in every layout, independent of the database."""
    site_url = site_url.rstrip("/")
    return {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": DEFAULT_TITLE,
        "url": site_url,
        "author": {
            "@type": "Person",
            "name": DEFAULT_AUTHOR_NAME,
        },
        "publisher": {
            "@type": "Organization",
            "name": DEFAULT_TITLE,
            "logo": {
                "@type": "ImageObject",
                "url": f"{site_url}/avatar.png",
            },
        },
    }


def build_page_metadata(site: Optional[SiteConfig], site_url: str) -> PageMetadata:
    """
    Build page metadata from the site document.

    site may be None when the sites collection is empty.
    """
    title = (site.title if site else None) or DEFAULT_TITLE
    description = (site.seo.description if site else None) or DEFAULT_DESCRIPTION
    keywords = list(site.seo.keywords) if site else []
    favicon = (site.favicon if site else None) or DEFAULT_FAVICON

    other: dict[str, str] = {}
    if site and site.is_open_adsense and site.google_adsense_id:
        other["google-adsense-account"] = f"ca-pub-{site.google_adsense_id}"
    other["script:ld+json"] = json.dumps(
        organization_json_ld(site, site_url), ensure_ascii=False
    )

    return PageMetadata(
        title=title,
        description=description,
        keywords=keywords,
        icons={
            "icon": favicon,
            "shortcut": favicon,
            "apple": favicon,
        },
        open_graph={
            "title": title,
            "site_name": title,
            "description": description,
            "type": "website",
        },
        other=other,
    )
