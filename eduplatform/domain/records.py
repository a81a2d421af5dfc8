"""
Conversion des lignes brutes du store vers le schéma partagé du domaine.

Les données live et les données de démonstration passent toutes deux par ces fonctions: le reste
de l'application ne distingue jamais la provenance d'un enregistrement. Les valeurs hors bornes
sont ramenées dans leur domaine (prix négatif -> 0, note bornée à [0, 5], clics plafonnés aux
impressions). Une colonne nullable à NULL reprend la valeur par défaut du modèle; une ligne qui
reste invalide est écartée et comptée dans `MappingReport.skipped`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import structlog
from pydantic import ValidationError

from eduplatform.domain.entities import Account, Advertisement, Course, Session
from eduplatform.domain.entitlements import normalize_tier

log = structlog.get_logger(__name__)

MAX_RATING = 5.0

# Colonnes nullables côté store: NULL laisse la valeur par défaut du modèle.
COURSE_OPTIONAL = (
    "description",
    "thumbnail_url",
    "instructor_id",
    "level",
    "category",
    "created_at",
    "updated_at",
)
ADVERTISEMENT_OPTIONAL = (
    "description",
    "image_url",
    "company_logo_url",
    "target_url",
    "category",
    "placement",
)
ACCOUNT_OPTIONAL = ("email", "name", "avatar_url", "created_at", "updated_at")


@dataclass
class MappingReport:
    """Résultat d'un passage à la frontière: enregistrements valides et nombre d'écartés."""

    records: list[Any] = field(default_factory=list)
    skipped: int = 0
    clamped: int = 0

    @property
    def degraded(self) -> bool:
        """Vrai si au moins une ligne a été corrigée ou écartée."""
        return bool(self.skipped or self.clamped)


def clamp(value: Any, low: float, high: float | None = None) -> float:
    """Borne une valeur numérique; une valeur non numérique vaut `low`."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if number != number:  # NaN
        return low
    if number < low:
        return low
    if high is not None and number > high:
        return high
    return number


def _non_negative_int(value: Any) -> int:
    return int(clamp(value, 0))


def _drop_nulls(data: dict[str, Any], keys: Iterable[str]) -> None:
    for key in keys:
        if key in data and data[key] is None:
            del data[key]


def _as_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(t) for t in (value or [])]


def _as_date(value: Any) -> Any:
    """Accepte date, datetime ou chaîne ISO (avec ou sans heure)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        return value[:10]
    return value


def _course_fields(row: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(row)
    data["id"] = str(data.get("id", ""))
    data["price"] = round(clamp(data.get("price"), 0), 2)
    data["duration"] = _non_negative_int(data.get("duration"))
    data["total_views"] = _non_negative_int(data.get("total_views"))
    data["rating"] = clamp(data.get("rating"), 0, MAX_RATING)
    data["total_ratings"] = _non_negative_int(data.get("total_ratings"))
    data["tags"] = _as_tags(data.get("tags"))
    data["is_published"] = bool(data.get("is_published", False))
    data.pop("instructor", None)
    _drop_nulls(data, COURSE_OPTIONAL)
    return data


def _advertisement_fields(row: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(row)
    data["id"] = str(data.get("id", ""))
    data["price_per_day"] = round(clamp(data.get("price_per_day"), 0), 2)
    impressions = _non_negative_int(data.get("impressions"))
    data["impressions"] = impressions
    data["clicks"] = min(_non_negative_int(data.get("clicks")), impressions)
    data["start_date"] = _as_date(data.get("start_date"))
    data["end_date"] = _as_date(data.get("end_date"))
    data.pop("status", None)  # dérivé des dates
    _drop_nulls(data, ADVERTISEMENT_OPTIONAL)
    return data


def _changed(row: Mapping[str, Any], fixed: Mapping[str, Any], keys: Iterable[str]) -> bool:
    for key in keys:
        if key in row and row[key] is not None and row[key] != fixed[key]:
            return True
    return False


def map_courses(rows: Iterable[Mapping[str, Any]]) -> MappingReport:
    """Convertit des lignes `courses` en `Course`, en corrigeant ou écartant les invalides."""
    report = MappingReport()
    for row in rows:
        fields = _course_fields(row)
        if _changed(row, fields, ("price", "total_views", "rating", "total_ratings")):
            report.clamped += 1
        try:
            report.records.append(Course.model_validate(fields))
        except ValidationError as err:
            report.skipped += 1
            log.warning("course_row_skipped", course_id=fields.get("id"), errors=err.error_count())
    return report


def map_advertisements(rows: Iterable[Mapping[str, Any]]) -> MappingReport:
    """Convertit des lignes `advertisements` en `Advertisement`."""
    report = MappingReport()
    for row in rows:
        fields = _advertisement_fields(row)
        if _changed(row, fields, ("price_per_day", "impressions", "clicks")):
            report.clamped += 1
        try:
            report.records.append(Advertisement.model_validate(fields))
        except ValidationError as err:
            report.skipped += 1
            log.warning("advertisement_row_skipped", ad_id=fields.get("id"), errors=err.error_count())
    return report


def map_account(row: Mapping[str, Any]) -> Account:
    """Convertit une ligne `profiles`; un palier inconnu retombe sur `basic`."""
    data = dict(row)
    raw_tier = data.pop("account_type", data.pop("tier", None))
    data["tier"] = normalize_tier(raw_tier)
    _drop_nulls(data, ACCOUNT_OPTIONAL)
    data["id"] = str(data.get("id", ""))
    return Account.model_validate(data)


def display_name(session: Session) -> str:
    """Nom affichable au mieux: metadata name/full_name, partie locale de l'email, sinon "User"."""
    for key in ("name", "full_name"):
        value = session.metadata.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    local = session.email.split("@", 1)[0].strip()
    return local or "User"


def account_from_session(session: Session) -> Account:
    """Compte minimal synthétisé quand le profil est illisible (palier `basic`)."""
    return Account(id=session.user_id, email=session.email, name=display_name(session), tier="basic")
