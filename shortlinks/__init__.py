"""Core short link allocation and redirect resolution."""

from .errors import (
    CollisionError,
    ExhaustedError,
    InvalidLinkError,
    LinkNotFoundError,
    ShortLinksError,
    StoreUnavailable,
)
from .resolver import RedirectResolver
from .service import LinkService
from .shortcode import ShortCodeGenerator

__all__ = [
    "CollisionError",
    "ExhaustedError",
    "InvalidLinkError",
    "LinkNotFoundError",
    "LinkService",
    "RedirectResolver",
    "ShortCodeGenerator",
    "ShortLinksError",
    "StoreUnavailable",
]
