"""Tests pour l'endpoint de santé de l'application."""

from fastapi.testclient import TestClient

from eduplatform.app.main import app
from eduplatform.core.http_constants import HTTP_OK


def test_health():
    """Teste que l'endpoint de santé retourne un statut OK, même en mode démo."""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    data = r.json()
    assert data["status"] == "ok"
    assert data["storage"] == "demo"
    assert data["store_configured"] is False
    assert data["mode"] == "demo"


def test_health_after_startup():
    """Le démarrage de l'application charge les données de démonstration."""
    with TestClient(app) as client:
        data = client.get("/health").json()
    assert data["phase"] == "ready_demo"
