"""
Agrégation des statistiques du tableau de bord.

Objectif: dériver, à partir d'une collection de cours ou d'annonces, un instantané de statistiques
recalculé à chaque lecture. Les formules reprennent des estimations fixes (vidéos par cours,
multiplicateur de ventes, taux de complétion) tant que les vidéos, paiements et progressions ne
sont pas agrégés.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, timezone

from eduplatform.domain.entities import AdStats, Advertisement, Course, DashboardStats
from eduplatform.domain.records import MAX_RATING, clamp

VIDEOS_PER_COURSE = 8
VIEWS_PER_STUDENT = 10
SALES_PER_COURSE = 10
MONTHLY_SALES_PER_COURSE = 2
# Placeholder until real progress records are wired in.
COMPLETION_RATE = 78.5
DEFAULT_AVG_RATING = 4.5
AD_BILLING_DAYS = 30


def _money(value: float) -> float:
    return round(value, 2)


def compute_stats(courses: Iterable[Course], *, include_unpublished: bool = False) -> DashboardStats:
    """
    Calcule les statistiques du tableau de bord pour une liste de cours.

    Règles:
    - total_courses: nombre de cours comptés (publiés seulement, sauf `include_unpublished`)
    - total_videos: total_courses * 8
    - total_students: floor(total_views / 10)
    - total_revenue / monthly_revenue: somme des prix * 10 / * 2
    - completion_rate: constante 78.5
    - avg_rating: moyenne des notes (une note 0 compte pour 0), 4.5 si aucun cours

    Les valeurs hors bornes sont ramenées dans leur domaine; aucune entrée ne fait échouer le calcul.
    """
    counted = [c for c in courses if include_unpublished or c.is_published]
    views = sum(int(clamp(c.total_views, 0)) for c in counted)
    price_total = sum(clamp(c.price, 0) for c in counted)
    ratings = [clamp(c.rating, 0, MAX_RATING) for c in counted]
    avg_rating = sum(ratings) / len(ratings) if ratings else DEFAULT_AVG_RATING
    return DashboardStats(
        total_courses=len(counted),
        total_videos=len(counted) * VIDEOS_PER_COURSE,
        total_views=views,
        total_students=math.floor(views / VIEWS_PER_STUDENT),
        total_revenue=_money(price_total * SALES_PER_COURSE),
        monthly_revenue=_money(price_total * MONTHLY_SALES_PER_COURSE),
        completion_rate=COMPLETION_RATE,
        avg_rating=avg_rating,
    )


def compute_ad_stats(ads: Iterable[Advertisement], now: datetime | date | None = None) -> AdStats:
    """
    Calcule les agrégats des annonces à un instant unique.

    `now` est capturé une seule fois pour tout l'appel: une annonce ne peut pas basculer de
    `active` à `expired` entre deux champs. Les doublons (même id) ne sont comptés qu'une fois.
    """
    instant = now or datetime.now(timezone.utc)
    seen: set[str] = set()
    counts = {"active": 0, "pending": 0, "expired": 0}
    impressions = clicks = 0
    daily_price = 0.0
    for ad in ads:
        if ad.id in seen:
            continue
        seen.add(ad.id)
        counts[ad.status_at(instant)] += 1
        ad_impressions = int(clamp(ad.impressions, 0))
        impressions += ad_impressions
        clicks += int(clamp(ad.clicks, 0, ad_impressions))
        daily_price += clamp(ad.price_per_day, 0)
    ctr = round(clicks / impressions * 100, 2) if impressions else 0.0
    return AdStats(
        active_count=counts["active"],
        pending_count=counts["pending"],
        expired_count=counts["expired"],
        total_impressions=impressions,
        total_clicks=clicks,
        click_through_rate=ctr,
        estimated_monthly_revenue=_money(daily_price * AD_BILLING_DAYS),
    )
