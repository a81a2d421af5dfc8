"""
Application principale FastAPI.

Ce module assemble les composants du tableau de bord : middlewares, routes, métriques et cycle de
vie du contrôleur de données.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Lancer le premier chargement au démarrage et l'abandonner à l'arrêt
- Monter les routers (santé, tableau de bord, entitlements, métriques)
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from eduplatform.api.routes_dashboard import router as dashboard_router
from eduplatform.api.routes_entitlements import router as entitlements_router
from eduplatform.api.routes_health import router as health_router
from eduplatform.app.metrics import PrometheusMiddleware, metrics_router
from eduplatform.core.container import container
from eduplatform.core.errors import register_error_handlers
from eduplatform.core.logging import setup_logging
from eduplatform.middlewares.request_context import RequestContextMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Premier chargement au démarrage; tout chargement en cours est abandonné à l'arrêt."""
    controller = container.controller
    await controller.initialize()
    try:
        yield
    finally:
        await controller.shutdown()


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares (contexte de requête, Prometheus)
    - Enregistre les gestionnaires d'erreurs standard
    - Publie les routes
    """
    settings = container.settings
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG, lifespan=lifespan)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(dashboard_router)
    app.include_router(entitlements_router)
    app.include_router(metrics_router)
    return app


app = create_app()
