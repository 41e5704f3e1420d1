# contact_api/api/routes/__init__.py
from .admin import router as admin_router
from .contact import router as contact_router
from .health import router as health_router

__all__ = ["admin_router", "contact_router", "health_router"]
