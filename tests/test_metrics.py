"""Tests pour les métriques Prometheus.

Ce module teste que les métriques Prometheus sont correctement exposées via l'endpoint /metrics.
"""

from fastapi.testclient import TestClient

from eduplatform.app.main import app
from eduplatform.core.http_constants import HTTP_OK


def test_metrics_exposed():
    """Teste que l'endpoint /metrics expose les métriques HTTP et de chargement."""
    c = TestClient(app)
    c.get("/health")
    r = c.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    assert b"dashboard_initialize_total" in r.content
    assert b"record_store_latency_seconds" in r.content


def test_initialize_counts_mode():
    """Un démarrage sans store incrémente le compteur du mode démo."""
    with TestClient(app) as c:
        body = c.get("/metrics").text
    assert 'dashboard_initialize_total{mode="demo"}' in body
    assert "dashboard_live_mode 0.0" in body
