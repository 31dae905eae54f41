"""
Server-side rendering with Jinja2 templates.
"""

from .templating import render_author_intro, templates

__all__ = ["render_author_intro", "templates"]
