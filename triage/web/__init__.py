"""HTTP surface: aiohttp routes and HTML rendering."""

from triage.web.app import create_app, create_app_from_config

__all__ = ["create_app", "create_app_from_config"]
