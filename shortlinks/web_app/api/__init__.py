"""JSON API and redirect routes."""

from .routes import redirect_router, router as api_router

__all__ = ["api_router", "redirect_router"]
