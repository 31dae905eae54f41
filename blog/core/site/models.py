"""
Domain models for the site configuration document.

The document itself lives in MongoDB and is owned by whatever edits the
site; this code only reads it. Every field is optional because consumers
substitute defaults field by field.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


def _clean_str(value: Any) -> Optional[str]:
    """Strings pass through stripped; blanks and non-strings become None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _clean_keywords(value: Any) -> list[str]:
    """Keywords may be stored as a list or a comma-separated string."""
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


@dataclass
class SeoSettings:
    description: Optional[str] = None
    keywords: list[str] = field(default_factory=list)


@dataclass
class AuthorInfo:
    name: Optional[str] = None
    description: Optional[str] = None
    avatar: Optional[str] = None


@dataclass
class SocialLinks:
    """
    Links to the author's profiles.

    Only github is used by the page metadata; the rest are kept so the
    site API can return them unchanged.
    """
    github: Optional[str] = None
    others: dict[str, str] = field(default_factory=dict)

    @property
    def all_links(self) -> list[str]:
        links = [self.github] if self.github else []
        links.extend(self.others.values())
        return links


@dataclass
class SiteConfig:
    """
    The single site configuration document.

    Built from the raw MongoDB document with from_document, which accepts
    missing or malformed fields and leaves them as None.
    """
    title: Optional[str] = None
    seo: SeoSettings = field(default_factory=SeoSettings)
    author: AuthorInfo = field(default_factory=AuthorInfo)
    social: SocialLinks = field(default_factory=SocialLinks)
    favicon: Optional[str] = None
    is_open_adsense: bool = False
    google_adsense_id: Optional[str] = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "SiteConfig":
        seo = document.get("seo") or {}
        author = document.get("author") or {}
        social = document.get("social") or {}

        if not isinstance(seo, dict):
            seo = {}
        if not isinstance(author, dict):
            author = {}
        if not isinstance(social, dict):
            social = {}

        others = {
            name: link.strip()
            for name, link in social.items()
            if name != "github" and isinstance(link, str) and link.strip()
        }

        adsense_id = document.get("googleAdsenseId")
        if adsense_id is not None and not isinstance(adsense_id, str):
            adsense_id = str(adsense_id)

        return cls(
            title=_clean_str(document.get("title")),
            seo=SeoSettings(
                description=_clean_str(seo.get("description")),
                keywords=_clean_keywords(seo.get("keywords")),
            ),
            author=AuthorInfo(
                name=_clean_str(author.get("name")),
                description=_clean_str(author.get("description")),
                avatar=_clean_str(author.get("avatar")),
            ),
            social=SocialLinks(
                github=_clean_str(social.get("github")),
                others=others,
            ),
            favicon=_clean_str(document.get("favicon")),
            is_open_adsense=bool(document.get("isOpenAdsense")),
            google_adsense_id=_clean_str(adsense_id),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the document's camelCase shape."""
        social: dict[str, str] = dict(self.social.others)
        if self.social.github:
            social["github"] = self.social.github

        return {
            "title": self.title,
            "seo": {
                "description": self.seo.description,
                "keywords": list(self.seo.keywords),
            },
            "author": {
                "name": self.author.name,
                "description": self.author.description,
                "avatar": self.author.avatar,
            },
            "social": social,
            "favicon": self.favicon,
            "isOpenAdsense": self.is_open_adsense,
            "googleAdsenseId": self.google_adsense_id,
        }
