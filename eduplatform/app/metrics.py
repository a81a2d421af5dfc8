"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP et celles du chargement du tableau de bord (modes de données,
dégradations, avis d'erreur, latence du store), ainsi que la route `/metrics`.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Dashboard loading
DASHBOARD_INITIALIZE = Counter(
    "dashboard_initialize_total",
    "Completed dashboard initializations by resulting data mode",
    ["mode"],
)
DASHBOARD_DEGRADATIONS = Counter(
    "dashboard_degradations_total",
    "Sub-step degradations handled by a fallback",
    ["kind"],
)
DASHBOARD_NOTICES = Counter(
    "dashboard_notices_total",
    "User-visible error notices surfaced by initialization",
    ["code"],
)
DASHBOARD_STALE_RESULTS = Counter(
    "dashboard_stale_results_total",
    "Initialization results discarded because a newer generation was issued",
)
DASHBOARD_LIVE = Gauge(
    "dashboard_live_mode",
    "1 when the current dashboard data comes from the live store, 0 otherwise",
)

# Record store
RECORD_STORE_LATENCY = Histogram(
    "record_store_latency_seconds",
    "Latency of record store calls",
    ["op"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 4.0, 8.0],
)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware Prometheus: compte les requêtes et mesure leur latence par route."""

    async def dispatch(self, request: Request, call_next):
        """
        Traite une requête HTTP et collecte les métriques.

        Args:
            request: Requête HTTP entrante.
            call_next: Fonction pour appeler le middleware suivant.

        Returns:
            Response: Réponse HTTP avec métriques collectées.
        """
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
