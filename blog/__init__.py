"""
Personal blog backend.

This package contains the complete application:
- core: Framework-agnostic upload and site logic
- infrastructure: Object storage, local disk and MongoDB integrations
- api: FastAPI routes and dependencies
- web: Jinja2 templating for server-rendered pages
- config: Application configuration
"""

__version__ = "0.1.0"
