"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Centraliser l'accès au contrôleur de disponibilité des données pour les endpoints.
- Offrir un point de substitution (`app.dependency_overrides`) pour les tests.
"""

from eduplatform.core.container import container
from eduplatform.services.data_availability import DataAvailabilityController


def get_controller() -> DataAvailabilityController:
    """Retourne le contrôleur partagé par l'application."""
    return container.controller
