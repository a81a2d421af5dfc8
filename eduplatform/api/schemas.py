# Schémas Pydantic exposés par l'API (réponses en lecture seule).

from datetime import datetime

from pydantic import BaseModel

from eduplatform.domain.entities import (
    Account,
    AdStats,
    AdStatus,
    Advertisement,
    Course,
    DashboardStats,
    DataMode,
    ErrorNotice,
)
from eduplatform.domain.entitlements import EntitlementSet


class InitResponse(BaseModel):
    """Résultat d'un (re)chargement: mode de données, compte et avis éventuel."""

    mode: DataMode
    account: Account | None = None
    error: ErrorNotice | None = None


class DashboardResponse(BaseModel):
    """Vue complète du tableau de bord.

    Champs:
    - mode: "live" ou "demo"
    - account: compte résolu (None pour un visiteur anonyme)
    - error: avis unique, non bloquant
    - stats: statistiques recalculées à la lecture
    - entitlements / feature_highlights / can_upgrade: vue du palier
    - courses: cours affichés
    - loaded_at: instant du dernier chargement appliqué
    """

    mode: DataMode
    account: Account | None = None
    error: ErrorNotice | None = None
    loading: bool = False
    stats: DashboardStats
    entitlements: EntitlementSet
    feature_highlights: list[str]
    can_upgrade: bool
    courses: list[Course]
    loaded_at: datetime | None = None


class AdvertisementView(BaseModel):
    """Annonce accompagnée de son statut dérivé."""

    advertisement: Advertisement
    status: AdStatus


class AdsResponse(BaseModel):
    """Annonces et agrégats calculés au même instant."""

    mode: DataMode
    advertisements: list[AdvertisementView]
    stats: AdStats


class TierEntitlementsResponse(BaseModel):
    """Entitlements résolus pour un palier demandé."""

    requested: str
    tier: str
    entitlements: EntitlementSet
    feature_highlights: list[str]
    can_upgrade: bool
