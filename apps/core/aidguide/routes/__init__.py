"""Route modules."""

from .auth import router as auth_router
from .guides import router as guides_router

__all__ = ["auth_router", "guides_router"]
