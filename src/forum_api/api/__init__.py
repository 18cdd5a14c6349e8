"""HTTP API routers."""

from forum_api.api.router import api_router

__all__ = ["api_router"]
