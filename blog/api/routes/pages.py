"""
Server-rendered pages.

Each page load reads the site document once to build <head> metadata.
The author intro is rendered from the cached site store instead, so it
shows a placeholder until the store has been populated.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ...core.site.metadata import build_page_metadata, website_json_ld
from ...web.templating import render_author_intro, templates
from ..dependencies import SettingsDep, SiteRepositoryDep, SiteStoreDep

router = APIRouter()


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def home(
    request: Request,
    settings: SettingsDep,
    repository: SiteRepositoryDep,
    store: SiteStoreDep,
):
    site = repository.get_site()
    metadata = build_page_metadata(site, settings.site_url)

    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "metadata": metadata,
            "website_json_ld": website_json_ld(settings.site_url),
            "gtm_id": settings.google_tag_manager_id,
            "author_intro": render_author_intro(store.snapshot()),
        },
    )
