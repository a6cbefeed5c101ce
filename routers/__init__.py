"""Routers module for Mwalimu Bot."""

from .api import router as api_router
from .whatsapp import router as whatsapp_router

__all__ = ["api_router", "whatsapp_router"]
