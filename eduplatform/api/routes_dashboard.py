"""
Routes du tableau de bord: vue agrégée, rafraîchissement, annonces et accès aux insights IA.

Toutes les vues sont recalculées à la lecture depuis l'état courant du contrôleur; la seule action
exposée est le déclenchement d'un nouveau chargement (`POST /dashboard/refresh`).
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from eduplatform.api.deps import get_controller
from eduplatform.api.schemas import (
    AdsResponse,
    AdvertisementView,
    DashboardResponse,
    InitResponse,
)
from eduplatform.domain.aggregation import compute_ad_stats
from eduplatform.domain.entitlements import can_upgrade, feature_highlights, require_capability
from eduplatform.services.data_availability import DataAvailabilityController

router = APIRouter(tags=["dashboard"])
controller_dep = Depends(get_controller)


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(controller: DataAvailabilityController = controller_dep):
    """
    Retourne la vue complète du tableau de bord.

    Retour: `DashboardResponse` (mode, compte, avis, statistiques, entitlements, cours).
    """
    state = controller.state
    tier = state.account.tier if state.account else None
    return DashboardResponse(
        mode=state.mode,
        account=state.account,
        error=state.error,
        loading=state.loading,
        stats=controller.stats(),
        entitlements=controller.entitlements(),
        feature_highlights=feature_highlights(tier),
        can_upgrade=can_upgrade(tier),
        courses=list(state.courses),
        loaded_at=state.loaded_at,
    )


@router.post("/dashboard/refresh", response_model=InitResponse)
async def refresh_dashboard(controller: DataAvailabilityController = controller_dep):
    """Déclenche un nouveau chargement; rejoint celui en cours s'il y en a un."""
    result = await controller.initialize()
    return InitResponse(mode=result.mode, account=result.account, error=result.error)


@router.get("/dashboard/ads", response_model=AdsResponse)
def get_ads(controller: DataAvailabilityController = controller_dep):
    """Annonces avec statut dérivé; statuts et agrégats partagent le même instant."""
    state = controller.state
    now = datetime.now(timezone.utc)
    return AdsResponse(
        mode=state.mode,
        advertisements=[
            AdvertisementView(advertisement=ad, status=ad.status_at(now))
            for ad in state.advertisements
        ],
        stats=compute_ad_stats(state.advertisements, now),
    )


@router.get("/insights/access")
def insights_access(controller: DataAvailabilityController = controller_dep):
    """Accès aux insights IA: réservé aux paliers qui accordent `ai_insights`."""
    entitlements = controller.entitlements()
    require_capability(entitlements, "ai_insights")
    return {"ai_insights": True, "entitlements": entitlements}
