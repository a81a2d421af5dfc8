"""
Quick smoke test for API endpoints using TestClient.

Checks:
- GET /health
- GET /dashboard
- POST /dashboard/refresh
- GET /dashboard/ads
- GET /entitlements/{tier}
"""

from fastapi.testclient import TestClient

from eduplatform.app.main import app


def main() -> None:
    """Exécute les appels de base et affiche un résumé de chaque réponse."""
    with TestClient(app) as client:
        r = client.get("/health")
        print("/health:", r.status_code, r.json())

        r = client.get("/dashboard")
        data = r.json()
        print("/dashboard:", r.status_code, {"mode": data.get("mode"), "stats": data.get("stats")})

        r = client.post("/dashboard/refresh")
        print("/dashboard/refresh:", r.status_code, r.json())

        r = client.get("/dashboard/ads")
        print("/dashboard/ads:", r.status_code, r.json().get("stats"))

        for tier in ("basic", "premium", "full", "unknown"):
            r = client.get(f"/entitlements/{tier}")
            print(f"/entitlements/{tier}:", r.status_code, r.json().get("entitlements"))


if __name__ == "__main__":
    main()
