"""Route de consultation des entitlements par palier."""

from fastapi import APIRouter

from eduplatform.api.schemas import TierEntitlementsResponse
from eduplatform.domain.entitlements import (
    can_upgrade,
    feature_highlights,
    normalize_tier,
    resolve_entitlements,
)

router = APIRouter(prefix="/entitlements", tags=["entitlements"])


@router.get("/{tier}", response_model=TierEntitlementsResponse)
def get_tier_entitlements(tier: str):
    """Résout un palier quelconque; une valeur inconnue retombe sur `basic`."""
    return TierEntitlementsResponse(
        requested=tier,
        tier=normalize_tier(tier),
        entitlements=resolve_entitlements(tier),
        feature_highlights=feature_highlights(tier),
        can_upgrade=can_upgrade(tier),
    )
