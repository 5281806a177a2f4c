"""
API Routes Module
"""
from .health import router as health_router
from .clients import router as clients_router
from .sessions import router as sessions_router
from .invoices import router as invoices_router
from .staff import router as staff_router
from .products import router as products_router
from .marketing_leads import router as marketing_leads_router
from .analytics import router as analytics_router
from .search import router as search_router

__all__ = [
    "health_router",
    "clients_router",
    "sessions_router",
    "invoices_router",
    "staff_router",
    "products_router",
    "marketing_leads_router",
    "analytics_router",
    "search_router",
]
