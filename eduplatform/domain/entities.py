"""
Entités du domaine métier.

Ce module définit le schéma partagé (comptes, cours, annonces) auquel se conforment à la fois les
données live du store et les données de démonstration, ainsi que les vues dérivées exposées au
tableau de bord (statistiques, avis d'erreur).
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

Tier = Literal["basic", "premium", "full"]
TIERS: tuple[str, ...] = ("basic", "premium", "full")
CourseLevel = Literal["beginner", "intermediate", "advanced"]
AdPlacement = Literal["banner", "sidebar", "content", "footer"]
AdStatus = Literal["active", "pending", "expired"]
DataMode = Literal["live", "demo"]


class Account(BaseModel):
    """Compte instructeur; le palier (`tier`) est l'unique entrée des entitlements."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    email: str = ""
    name: str = ""
    tier: Tier = Field("basic", validation_alias=AliasChoices("tier", "account_type"))
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Session(BaseModel):
    """Identité de session telle que fournie par le store (avant lecture du profil)."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class Course(BaseModel):
    """Cours publié (ou brouillon) d'un instructeur."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    thumbnail_url: str | None = None
    instructor_id: str | None = None
    price: float = Field(0.0, ge=0)
    duration: int = Field(0, ge=0)  # minutes
    level: CourseLevel = "beginner"
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    is_published: bool = False
    total_views: int = Field(0, ge=0)
    rating: float = Field(0.0, ge=0, le=5)
    total_ratings: int = Field(0, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        # ensemble ordonné: premier vu conservé
        return list(dict.fromkeys(t.strip() for t in value if t and t.strip()))


class Advertisement(BaseModel):
    """Annonce payante; le statut est dérivé des dates, jamais stocké."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    image_url: str | None = None
    company_logo_url: str | None = None
    target_url: str | None = None
    price_per_day: float = Field(0.0, ge=0)
    start_date: date
    end_date: date
    impressions: int = Field(0, ge=0)
    clicks: int = Field(0, ge=0)
    category: str = ""
    placement: AdPlacement = "banner"

    @model_validator(mode="after")
    def _clicks_within_impressions(self) -> Advertisement:
        if self.clicks > self.impressions:
            raise ValueError("clicks must not exceed impressions")
        return self

    def status_at(self, now: datetime | date) -> AdStatus:
        """Statut de l'annonce relativement à `now` (bornes incluses)."""
        today = now.date() if isinstance(now, datetime) else now
        if today < self.start_date:
            return "pending"
        if today > self.end_date:
            return "expired"
        return "active"


class DashboardStats(BaseModel):
    """Instantané calculé à la demande; jamais persisté."""

    total_courses: int
    total_videos: int
    total_views: int
    total_students: int
    total_revenue: float
    monthly_revenue: float
    completion_rate: float
    avg_rating: float


class AdStats(BaseModel):
    """Agrégats des annonces pour un instant `now` donné."""

    active_count: int
    pending_count: int
    expired_count: int
    total_impressions: int
    total_clicks: int
    click_through_rate: float
    estimated_monthly_revenue: float


class Degradation(str, Enum):
    """Dégradations possibles lors du chargement; aucune n'est fatale."""

    CONFIGURATION_ABSENT = "configuration_absent"
    SESSION_UNAVAILABLE = "session_unavailable"
    PROFILE_LOAD_FAILED = "profile_load_failed"
    RECORD_QUERY_FAILED = "record_query_failed"
    AGGREGATION_INPUT_INVALID = "aggregation_input_invalid"


class ErrorNotice(BaseModel):
    """Avis informatif unique, non bloquant, que l'utilisateur peut fermer."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    dismissible: bool = True
