"""
Résolution des entitlements par palier d'abonnement.

Ce module associe chaque palier (basic, premium, full) à un ensemble concret de capacités et de
limites numériques. La table est construite une seule fois à l'import et sa monotonie
(basic <= premium <= full sur chaque champ) y est vérifiée en un seul endroit.

"Illimité" est représenté par la sentinelle `UNLIMITED` (une chaîne), jamais par un grand entier:
`count < UNLIMITED` lève `TypeError`, les appelants passent donc par `within_limit`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict

from eduplatform.core.errors import APIError, ErrorCodes
from eduplatform.core.http_constants import HTTP_FORBIDDEN
from eduplatform.domain.entities import TIERS

UNLIMITED: Final = "unlimited"

Limit = int | Literal["unlimited"]

CAPABILITY_FLAGS: tuple[str, ...] = (
    "analytics",
    "social_integration",
    "ai_insights",
    "networking",
    "custom_branding",
)
LIMIT_FIELDS: tuple[str, ...] = ("max_courses", "max_videos_per_course")

DEFAULT_TIER: Final = "basic"


class EntitlementSet(BaseModel):
    """Capacités et plafonds accordés par un palier."""

    model_config = ConfigDict(frozen=True)

    max_courses: Limit
    max_videos_per_course: Limit
    analytics: bool = False
    social_integration: bool = False
    ai_insights: bool = False
    networking: bool = False
    custom_branding: bool = False


def within_limit(count: int, limit: Limit) -> bool:
    """Indique si `count` éléments restent strictement sous `limit`."""
    if limit == UNLIMITED:
        return True
    return count < limit


def limit_at_least(a: Limit, b: Limit) -> bool:
    """Ordre naturel des limites: `a >= b`, UNLIMITED dominant toute valeur finie."""
    if a == UNLIMITED:
        return True
    if b == UNLIMITED:
        return False
    return a >= b


def dominates(higher: EntitlementSet, lower: EntitlementSet) -> bool:
    """Vrai si `higher` accorde au moins autant que `lower` sur chaque champ."""
    for field in LIMIT_FIELDS:
        if not limit_at_least(getattr(higher, field), getattr(lower, field)):
            return False
    return all(getattr(higher, f) or not getattr(lower, f) for f in CAPABILITY_FLAGS)


def _build_table() -> MappingProxyType[str, EntitlementSet]:
    table = {
        "basic": EntitlementSet(max_courses=3, max_videos_per_course=10),
        "premium": EntitlementSet(
            max_courses=25,
            max_videos_per_course=100,
            analytics=True,
            social_integration=True,
            networking=True,
        ),
        "full": EntitlementSet(
            max_courses=UNLIMITED,
            max_videos_per_course=UNLIMITED,
            analytics=True,
            social_integration=True,
            ai_insights=True,
            networking=True,
            custom_branding=True,
        ),
    }
    for lower, higher in zip(TIERS, TIERS[1:]):
        if not dominates(table[higher], table[lower]):
            raise ValueError(f"entitlement table not monotonic: {lower} > {higher}")
    return MappingProxyType(table)


ENTITLEMENT_TABLE = _build_table()

_FEATURE_HIGHLIGHTS: dict[str, tuple[str, ...]] = {
    "basic": ("3 courses", "10 videos per course", "Basic support"),
    "premium": ("25 courses", "100 videos per course", "Analytics", "Social networks", "Networking"),
    "full": (
        "Unlimited courses",
        "Unlimited videos",
        "Advanced AI",
        "Custom branding",
        "Priority support",
    ),
}


def normalize_tier(tier: object) -> str:
    """Ramène une valeur quelconque à un palier connu; `basic` sinon (jamais `full`)."""
    if isinstance(tier, str):
        key = tier.strip().lower()
        if key in ENTITLEMENT_TABLE:
            return key
    return DEFAULT_TIER


def resolve_entitlements(tier: object) -> EntitlementSet:
    """Retourne l'ensemble d'entitlements du palier (fonction totale et pure)."""
    return ENTITLEMENT_TABLE[normalize_tier(tier)]


def feature_highlights(tier: object) -> list[str]:
    """Libellés lisibles des avantages d'un palier, pour l'écran d'abonnement."""
    return list(_FEATURE_HIGHLIGHTS[normalize_tier(tier)])


def can_upgrade(tier: object) -> bool:
    """Un palier autre que `full` peut toujours monter en gamme."""
    return normalize_tier(tier) != "full"


class EntitlementDenied(APIError):
    """Capacité absente du palier courant."""

    def __init__(self, capability: str) -> None:
        """Construit l'erreur 403 `missing_entitlement:<capability>`."""
        super().__init__(
            status_code=HTTP_FORBIDDEN,
            code=ErrorCodes.FORBIDDEN,
            message=f"missing_entitlement:{capability}",
            details={"capability": capability},
        )


class QuotaExceeded(APIError):
    """Plafond numérique du palier atteint."""

    def __init__(self, resource: str, limit: Limit) -> None:
        """Construit l'erreur 403 `quota_exceeded:<resource>`."""
        super().__init__(
            status_code=HTTP_FORBIDDEN,
            code=ErrorCodes.QUOTA_EXCEEDED,
            message=f"quota_exceeded:{resource}",
            details={"resource": resource, "limit": limit},
        )


def require_capability(entitlements: EntitlementSet, capability: str) -> None:
    """
    Vérifie qu'un ensemble d'entitlements accorde une capacité.

    Args:
        entitlements: Ensemble résolu pour le compte courant.
        capability: Nom du drapeau (voir `CAPABILITY_FLAGS`).

    Raises:
        EntitlementDenied: Si le drapeau est absent ou désactivé.
    """
    if capability not in CAPABILITY_FLAGS or not getattr(entitlements, capability):
        raise EntitlementDenied(capability)


def require_quota(limit: Limit, current_count: int, resource: str) -> None:
    """Lève `QuotaExceeded` si un élément de plus dépasserait `limit`."""
    if not within_limit(current_count, limit):
        raise QuotaExceeded(resource, limit)
