"""Web layer for short links."""

from .app_factory import create_app

__all__ = ["create_app"]
