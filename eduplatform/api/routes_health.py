"""
Endpoint de santé pour vérifier la disponibilité de l'API et du store.

Expose `/health` pour signaler l'état général de l'application et le mode de données courant.
"""

from fastapi import APIRouter, Depends

from eduplatform.api.deps import get_controller
from eduplatform.core.container import container
from eduplatform.services.data_availability import DataAvailabilityController

router = APIRouter(tags=["health"])
controller_dep = Depends(get_controller)


@router.get("/health")
def health(controller: DataAvailabilityController = controller_dep):
    """Vérifie la disponibilité de l'API; un mode démo reste un état sain."""
    state = controller.state
    return {
        "status": "ok",
        "storage": getattr(container, "storage_backend", "unknown"),
        "store_configured": controller.store_configured,
        "mode": state.mode,
        "phase": state.phase.value,
    }
