"""API routers."""

from .webhook import router as webhook_router

__all__ = ['webhook_router']
