# ============================================================
# Module : eduplatform/services/data_availability.py
# Objet  : Chargement des données du tableau de bord (live ou démo).
# Invariants :
#  - initialize() se termine toujours (jamais bloqué en chargement).
#  - Un seul résultat appliqué par génération; les résultats périmés sont ignorés.
#  - Au plus un ErrorNotice par appel, et seulement pour les échecs sans repli silencieux.
# ============================================================
"""Contrôleur de disponibilité des données du tableau de bord.

Ce module orchestre le démarrage et le rafraîchissement: vérification de la configuration du store,
lecture de session et de profil, chargement des cours publiés, puis repli déterministe sur les
données de démonstration en cas d'absence, de résultat vide ou d'erreur.

Machine à états::

    UNINITIALIZED -> CHECKING_CONFIG -> CHECKING_SESSION -> LOADING_LIVE -> READY_LIVE
                                     \\-> DEMO_FALLBACK -> READY_DEMO

L'avis d'erreur est un drapeau orthogonal porté par l'état, jamais un état bloquant.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum

import structlog

from eduplatform.app.metrics import (
    DASHBOARD_DEGRADATIONS,
    DASHBOARD_INITIALIZE,
    DASHBOARD_LIVE,
    DASHBOARD_NOTICES,
    DASHBOARD_STALE_RESULTS,
)
from eduplatform.domain.aggregation import compute_ad_stats, compute_stats
from eduplatform.domain.entities import (
    Account,
    AdStats,
    Advertisement,
    Course,
    DashboardStats,
    DataMode,
    Degradation,
    ErrorNotice,
)
from eduplatform.domain.entitlements import EntitlementSet, resolve_entitlements
from eduplatform.domain.records import account_from_session, map_advertisements, map_courses
from eduplatform.infra.demo.fixtures import demo_advertisements, demo_courses
from eduplatform.infra.record_store.base import RecordStore

log = structlog.get_logger(__name__)

PUBLISHED_ONLY = {"is_published": True}


class LoadPhase(str, Enum):
    """Étapes de la machine à états de chargement."""

    UNINITIALIZED = "uninitialized"
    CHECKING_CONFIG = "checking_config"
    CHECKING_SESSION = "checking_session"
    LOADING_LIVE = "loading_live"
    READY_LIVE = "ready_live"
    DEMO_FALLBACK = "demo_fallback"
    READY_DEMO = "ready_demo"


@dataclass(frozen=True)
class InitResult:
    """Résultat d'un appel à `initialize()`."""

    mode: DataMode
    account: Account | None
    error: ErrorNotice | None


@dataclass(frozen=True)
class DataState:
    """Instantané versionné des données courantes (lecture seule pour l'affichage)."""

    version: int = 0
    phase: LoadPhase = LoadPhase.UNINITIALIZED
    mode: DataMode = "demo"
    account: Account | None = None
    courses: tuple[Course, ...] = ()
    advertisements: tuple[Advertisement, ...] = ()
    error: ErrorNotice | None = None
    degradations: tuple[Degradation, ...] = ()
    loading: bool = False
    loaded_at: datetime | None = None

    def result(self) -> InitResult:
        """Projection `{mode, account, error}` de l'état."""
        return InitResult(mode=self.mode, account=self.account, error=self.error)


@dataclass
class _Outcome:
    """Accumulateur d'un chargement en cours (propre à une génération)."""

    account: Account | None = None
    courses: list[Course] = field(default_factory=list)
    advertisements: list[Advertisement] = field(default_factory=list)
    mode: DataMode = "live"
    error: ErrorNotice | None = None
    degradations: list[Degradation] = field(default_factory=list)

    def degrade(self, kind: Degradation) -> None:
        if kind not in self.degradations:
            self.degradations.append(kind)
        DASHBOARD_DEGRADATIONS.labels(kind=kind.value).inc()

    def fail(self, kind: Degradation, notice: ErrorNotice) -> None:
        """Dégradation visible: seul le premier échec produit l'avis."""
        self.degrade(kind)
        if self.error is None:
            self.error = notice


class DataAvailabilityController:
    """
    Orchestrateur du chargement des données du tableau de bord.

    Responsabilités:
    - Tenter le chargement live via `store`, chaque étape étant faillible sans être fatale.
    - Se replier sur les données de démonstration déterministes au besoin.
    - Garantir qu'un seul résultat est appliqué: un appel concurrent rejoint le chargement en
      cours, et `shutdown()` invalide tout résultat tardif.
    """

    def __init__(
        self,
        store: RecordStore | None,
        *,
        course_limit: int = 10,
        ad_limit: int = 20,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialise le contrôleur.

        Paramètres:
        - store: client du store, ou None s'il n'est pas configuré.
        - course_limit / ad_limit: taille des pages chargées.
        - clock: horloge injectable (UTC par défaut).
        """
        self._store = store
        self._course_limit = course_limit
        self._ad_limit = ad_limit
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = DataState()
        self._generation = 0
        self._inflight: asyncio.Task[InitResult] | None = None

    @property
    def state(self) -> DataState:
        """État courant (immuable)."""
        return self._state

    @property
    def generation(self) -> int:
        """Dernière génération émise."""
        return self._generation

    @property
    def store_configured(self) -> bool:
        """Indique si un store utilisable a été fourni."""
        return self._store is not None and self._store.is_configured

    async def initialize(self) -> InitResult:
        """
        Charge (ou recharge) les données du tableau de bord.

        Un appel émis pendant un chargement en cours rejoint ce chargement et reçoit le même
        résultat. Ne lève jamais pour un échec du store: chaque échec a son repli.
        """
        if self._inflight is None or self._inflight.done():
            self._generation += 1
            self._inflight = asyncio.create_task(self._load(self._generation))
        return await asyncio.shield(self._inflight)

    async def shutdown(self) -> None:
        """Abandonne le chargement en cours; son résultat éventuel ne sera jamais appliqué."""
        self._generation += 1
        task, self._inflight = self._inflight, None
        self._state = replace(self._state, loading=False)
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                log.info("dashboard_load_cancelled")

    def stats(self) -> DashboardStats:
        """Statistiques recalculées depuis les cours courants."""
        return compute_stats(self._state.courses)

    def ad_stats(self, now: datetime | date | None = None) -> AdStats:
        """Statistiques d'annonces pour l'instant `now` (horloge du contrôleur par défaut)."""
        return compute_ad_stats(self._state.advertisements, now or self._clock())

    def entitlements(self) -> EntitlementSet:
        """Entitlements du compte courant (`basic` pour un visiteur anonyme)."""
        account = self._state.account
        return resolve_entitlements(account.tier if account else None)

    def _enter_phase(self, generation: int, phase: LoadPhase) -> None:
        if generation == self._generation:
            self._state = replace(self._state, phase=phase, loading=True)

    async def _load(self, generation: int) -> InitResult:
        outcome = _Outcome()
        self._enter_phase(generation, LoadPhase.CHECKING_CONFIG)
        store = self._store
        if store is None or not store.is_configured:
            log.info("dashboard_store_unconfigured")
            outcome.degrade(Degradation.CONFIGURATION_ABSENT)
            return self._apply(generation, self._use_demo(generation, outcome))

        self._enter_phase(generation, LoadPhase.CHECKING_SESSION)
        outcome.account = await self._resolve_account(store, outcome)

        self._enter_phase(generation, LoadPhase.LOADING_LIVE)
        courses = await self._load_courses(store, outcome)
        if courses is None:
            return self._apply(generation, self._use_demo(generation, outcome))
        outcome.courses = courses
        outcome.advertisements = await self._load_advertisements(store, outcome)
        return self._apply(generation, outcome)

    async def _resolve_account(self, store: RecordStore, outcome: _Outcome) -> Account | None:
        try:
            session = await store.get_session()
        except Exception as err:
            log.info("session_unavailable", error=str(err), error_type=type(err).__name__)
            session = None
        if session is None:
            outcome.degrade(Degradation.SESSION_UNAVAILABLE)
            return None

        try:
            account = await store.get_profile(session.user_id)
        except Exception as err:
            log.warning("profile_load_failed", user_id=session.user_id, error=str(err))
            account = None
        if account is None:
            outcome.degrade(Degradation.PROFILE_LOAD_FAILED)
            return account_from_session(session)
        return account

    async def _load_courses(self, store: RecordStore, outcome: _Outcome) -> list[Course] | None:
        try:
            rows = await store.query_courses(PUBLISHED_ONLY, limit=self._course_limit)
        except Exception as err:
            log.warning("course_query_failed", error=str(err), error_type=type(err).__name__)
            outcome.fail(
                Degradation.RECORD_QUERY_FAILED,
                ErrorNotice(
                    code="record_query_failed",
                    message="Live course data could not be loaded; showing demo data.",
                ),
            )
            return None

        report = map_courses(rows)
        if report.degraded:
            outcome.degrade(Degradation.AGGREGATION_INPUT_INVALID)
        courses = [c for c in report.records if c.is_published]
        if not courses:
            log.info("course_query_empty", rows=len(rows))
            outcome.fail(
                Degradation.RECORD_QUERY_FAILED,
                ErrorNotice(
                    code="record_query_failed",
                    message="No published courses were found; showing demo data.",
                ),
            )
            return None
        return courses

    async def _load_advertisements(
        self, store: RecordStore, outcome: _Outcome
    ) -> list[Advertisement]:
        try:
            rows = await store.query_advertisements(limit=self._ad_limit)
        except Exception as err:
            # repli silencieux: liste vide, les cours live restent affichés
            log.warning("advertisement_query_failed", error=str(err))
            outcome.degrade(Degradation.RECORD_QUERY_FAILED)
            return []
        report = map_advertisements(rows)
        if report.degraded:
            outcome.degrade(Degradation.AGGREGATION_INPUT_INVALID)
        return report.records

    def _use_demo(self, generation: int, outcome: _Outcome) -> _Outcome:
        self._enter_phase(generation, LoadPhase.DEMO_FALLBACK)
        log.info("dashboard_fallback_demo", degradations=[d.value for d in outcome.degradations])
        outcome.mode = "demo"
        outcome.courses = demo_courses()
        outcome.advertisements = demo_advertisements()
        return outcome

    def _apply(self, generation: int, outcome: _Outcome) -> InitResult:
        result = InitResult(mode=outcome.mode, account=outcome.account, error=outcome.error)
        if generation != self._generation:
            DASHBOARD_STALE_RESULTS.inc()
            log.info("dashboard_result_discarded", generation=generation, latest=self._generation)
            return result

        live = outcome.mode == "live"
        self._state = DataState(
            version=generation,
            phase=LoadPhase.READY_LIVE if live else LoadPhase.READY_DEMO,
            mode=outcome.mode,
            account=outcome.account,
            courses=tuple(outcome.courses),
            advertisements=tuple(outcome.advertisements),
            error=outcome.error,
            degradations=tuple(outcome.degradations),
            loading=False,
            loaded_at=self._clock(),
        )
        DASHBOARD_INITIALIZE.labels(mode=outcome.mode).inc()
        DASHBOARD_LIVE.set(1 if live else 0)
        if outcome.error is not None:
            DASHBOARD_NOTICES.labels(code=outcome.error.code).inc()
        log.info(
            "dashboard_ready",
            mode=outcome.mode,
            generation=generation,
            courses=len(outcome.courses),
            notice=outcome.error.code if outcome.error else None,
        )
        return result
