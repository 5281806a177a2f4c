"""
FastAPI Application Factory

Creates and configures the API application: middleware, error handlers
and the /api routers.
"""

from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from studio.config import Settings
from studio.serving.api.errors import register_exception_handlers
from studio.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from studio.serving.api.routes import (
    analytics_router,
    clients_router,
    health_router,
    invoices_router,
    marketing_leads_router,
    products_router,
    search_router,
    sessions_router,
    staff_router,
)


def create_api_app(settings: Settings, lifespan: Optional[Callable] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Photography Studio API",
        description="Back-office API for clients, sessions, invoices, staff and products",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app, settings)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(clients_router, prefix="/api/clients", tags=["Clients"])
    app.include_router(sessions_router, prefix="/api/sessions", tags=["Sessions"])
    app.include_router(invoices_router, prefix="/api/invoices", tags=["Invoices"])
    app.include_router(staff_router, prefix="/api/staff", tags=["Staff"])
    app.include_router(products_router, prefix="/api/products", tags=["Products"])
    app.include_router(marketing_leads_router, prefix="/api/marketing-leads", tags=["Marketing Leads"])
    app.include_router(analytics_router, prefix="/api/analytics", tags=["Analytics"])
    app.include_router(search_router, prefix="/api/search", tags=["Search"])

    return app
