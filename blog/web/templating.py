"""
Jinja2 template environment shared by the page routes.

Components that are also rendered outside a request (the author intro)
get a plain render function so they can be used and tested without a
Request object.
"""

import json
from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates

from ..core.site.store import SiteState, author_intro_view

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def json_ld(value: Any) -> str:
    """Serialize for a <script type="application/ld+json"> block."""
    if isinstance(value, str):
        text = value
    else:
        text = json.dumps(value, ensure_ascii=False)
    # keep the payload from closing the surrounding script tag
    return text.replace("</", "<\\/")


templates.env.filters["json_ld"] = json_ld


def render_author_intro(state: SiteState) -> str:
    """Render the author intro component from a store snapshot."""
    template = templates.env.get_template("components/author_intro.html")
    return template.render(intro=author_intro_view(state))
