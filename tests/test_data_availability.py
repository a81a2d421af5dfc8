"""Tests pour le contrôleur de disponibilité des données.

Ce module couvre les chemins live et démo de `initialize()`, la règle d'avis unique, le repli
déterministe et la protection contre les chargements concurrents ou abandonnés.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest
from prometheus_client import REGISTRY

from eduplatform.domain.entities import Degradation
from eduplatform.infra.demo.fixtures import demo_courses
from eduplatform.infra.record_store.base import ConnectivityError, QueryError
from eduplatform.infra.record_store.memory_store import InMemoryRecordStore
from eduplatform.services.data_availability import DataAvailabilityController, LoadPhase
from factories import make_ad_row, make_course_row

FIXED_NOW = datetime(2025, 6, 15, tzinfo=timezone.utc)


def _controller(store) -> DataAvailabilityController:
    return DataAvailabilityController(store, clock=lambda: FIXED_NOW)


async def _settle() -> None:
    # laisse les tâches planifiées atteindre leur premier point d'attente
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_unconfigured_store_goes_demo_silently() -> None:
    """Pas de store: mode démo attendu, sans avis."""
    controller = _controller(None)
    result = await controller.initialize()
    assert result.mode == "demo"
    assert result.account is None
    assert result.error is None
    state = controller.state
    assert state.phase is LoadPhase.READY_DEMO
    assert state.loading is False
    assert state.degradations == (Degradation.CONFIGURATION_ABSENT,)
    assert [c.id for c in state.courses] == [c.id for c in demo_courses()]


@pytest.mark.asyncio
async def test_store_flagged_unconfigured_is_never_called() -> None:
    store = InMemoryRecordStore(configured=False)
    controller = _controller(store)
    result = await controller.initialize()
    assert result.mode == "demo"
    assert store.calls == []
    assert controller.store_configured is False


@pytest.mark.asyncio
async def test_live_load(live_store: InMemoryRecordStore) -> None:
    """Session, profil premium et cours publiés: mode live sans avis."""
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "live"
    assert result.error is None
    assert result.account is not None and result.account.tier == "premium"
    state = controller.state
    assert state.phase is LoadPhase.READY_LIVE
    assert {c.id for c in state.courses} == {"c1", "c2"}
    assert [a.id for a in state.advertisements] == ["a1"]
    assert state.loaded_at == FIXED_NOW
    assert state.degradations == ()
    assert controller.stats().total_views == 300
    assert controller.entitlements().analytics is True
    assert live_store.calls == [
        "get_session",
        "get_profile",
        "query_courses",
        "query_advertisements",
    ]


@pytest.mark.asyncio
async def test_anonymous_viewer_keeps_live_records(live_store: InMemoryRecordStore) -> None:
    """Sans session: visiteur anonyme (basic), pas d'avis, enregistrements live conservés."""
    live_store.session = None
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "live"
    assert result.account is None
    assert result.error is None
    assert Degradation.SESSION_UNAVAILABLE in controller.state.degradations
    assert "get_profile" not in live_store.calls
    assert controller.entitlements().max_courses == 3


@pytest.mark.asyncio
async def test_session_read_failure_is_anonymous(live_store: InMemoryRecordStore) -> None:
    live_store.fail_on["get_session"] = ConnectivityError("offline")
    result = await _controller(live_store).initialize()
    assert result.account is None
    assert result.error is None


@pytest.mark.asyncio
async def test_profile_failure_synthesizes_basic_account(live_store: InMemoryRecordStore) -> None:
    """Profil illisible: compte minimal `basic` issu de la session, sans avis."""
    live_store.fail_on["get_profile"] = ConnectivityError("timeout")
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "live"
    assert result.error is None
    assert result.account is not None
    assert result.account.id == "u1"
    assert result.account.name == "Ana Lima"
    assert result.account.tier == "basic"
    assert Degradation.PROFILE_LOAD_FAILED in controller.state.degradations


@pytest.mark.asyncio
async def test_missing_profile_row_synthesizes_account(live_store: InMemoryRecordStore) -> None:
    live_store.profiles.clear()
    result = await _controller(live_store).initialize()
    assert result.account is not None and result.account.tier == "basic"
    assert result.error is None


@pytest.mark.asyncio
async def test_course_query_failure_falls_back_with_one_notice(
    live_store: InMemoryRecordStore,
) -> None:
    """Plusieurs sous-étapes dégradées, un seul avis: celui de la requête de cours."""
    live_store.fail_on["get_profile"] = ConnectivityError("timeout")
    live_store.fail_on["query_courses"] = QueryError("boom")
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "demo"
    assert result.error is not None
    assert result.error.code == "record_query_failed"
    assert result.error.dismissible is True
    assert result.account is not None and result.account.tier == "basic"
    state = controller.state
    assert state.phase is LoadPhase.READY_DEMO
    assert state.loading is False
    assert [c.id for c in state.courses] == [c.id for c in demo_courses()]
    assert "query_advertisements" not in live_store.calls


@pytest.mark.asyncio
async def test_empty_course_result_falls_back(live_store: InMemoryRecordStore) -> None:
    """Résultat vide (ou seulement des brouillons): même repli que l'erreur."""
    live_store.courses = [make_course_row("draft", is_published=False)]
    result = await _controller(live_store).initialize()
    assert result.mode == "demo"
    assert result.error is not None and result.error.code == "record_query_failed"


@pytest.mark.asyncio
async def test_invalid_rows_are_clamped_and_reported(live_store: InMemoryRecordStore) -> None:
    live_store.courses = [make_course_row("c1", price=-10, rating=11)]
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "live"
    assert result.error is None
    assert Degradation.AGGREGATION_INPUT_INVALID in controller.state.degradations
    assert controller.stats().total_revenue == 0
    assert controller.stats().avg_rating == 5.0


@pytest.mark.asyncio
async def test_advertisement_failure_keeps_live_courses(live_store: InMemoryRecordStore) -> None:
    """Annonces indisponibles: liste vide, dégradation notée, aucun avis."""
    live_store.fail_on["query_advertisements"] = QueryError("ads down")
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "live"
    assert result.error is None
    assert controller.state.advertisements == ()
    assert Degradation.RECORD_QUERY_FAILED in controller.state.degradations
    assert {c.id for c in controller.state.courses} == {"c1", "c2"}


@pytest.mark.asyncio
async def test_null_optional_columns_stay_live(live_store: InMemoryRecordStore) -> None:
    """Des colonnes nullables à NULL ne font ni écarter la ligne ni basculer en démo."""
    live_store.courses = [
        make_course_row(
            "c1", description=None, thumbnail_url=None, category=None, level=None, tags=None
        )
    ]
    live_store.advertisements = [
        make_ad_row("a1", description=None, category=None, placement=None, image_url=None)
    ]
    controller = _controller(live_store)
    result = await controller.initialize()
    assert result.mode == "live"
    assert result.error is None
    assert [c.id for c in controller.state.courses] == ["c1"]
    assert [a.id for a in controller.state.advertisements] == ["a1"]
    assert controller.state.degradations == ()


@pytest.mark.asyncio
async def test_demo_fallback_is_deterministic() -> None:
    """Deux replis successifs donnent exactement les mêmes données et statistiques."""
    first = _controller(None)
    second = _controller(None)
    await first.initialize()
    await second.initialize()
    assert first.state.courses == second.state.courses
    assert first.state.advertisements == second.state.advertisements
    assert first.stats() == second.stats()
    stats = first.stats()
    assert stats.total_courses == 3
    assert stats.total_views == 2780
    assert stats.total_revenue == 6497.0


@pytest.mark.asyncio
async def test_concurrent_initialize_joins_inflight_load(live_store: InMemoryRecordStore) -> None:
    """Un second appel pendant un chargement rejoint le premier: un seul état appliqué."""
    live_store.gate = asyncio.Event()
    controller = _controller(live_store)
    first = asyncio.create_task(controller.initialize())
    second = asyncio.create_task(controller.initialize())
    await _settle()
    assert controller.state.loading is True
    live_store.gate.set()
    r1, r2 = await asyncio.gather(first, second)
    assert r1 == r2
    assert live_store.calls.count("query_courses") == 1
    assert controller.generation == 1
    assert controller.state.version == 1
    assert controller.state.mode == "live"


@pytest.mark.asyncio
async def test_refresh_after_completion_starts_new_generation(
    live_store: InMemoryRecordStore,
) -> None:
    controller = _controller(live_store)
    await controller.initialize()
    live_store.fail_on["query_courses"] = QueryError("boom")
    result = await controller.initialize()
    assert result.mode == "demo"
    assert controller.state.version == 2
    assert live_store.calls.count("query_courses") == 2


@pytest.mark.asyncio
async def test_shutdown_cancels_inflight_load(live_store: InMemoryRecordStore) -> None:
    """Un chargement abandonné n'écrit jamais son résultat."""
    live_store.gate = asyncio.Event()
    controller = _controller(live_store)
    pending = asyncio.create_task(controller.initialize())
    await _settle()
    await controller.shutdown()
    with pytest.raises(asyncio.CancelledError):
        await pending
    state = controller.state
    assert state.version == 0
    assert state.loading is False
    assert state.courses == ()


@pytest.mark.asyncio
async def test_stale_generation_result_is_discarded(live_store: InMemoryRecordStore) -> None:
    """Un résultat d'une génération dépassée est compté puis ignoré."""
    controller = _controller(live_store)
    await controller.initialize()
    applied = controller.state
    before = REGISTRY.get_sample_value("dashboard_stale_results_total") or 0.0
    live_store.fail_on["query_courses"] = QueryError("boom")
    result = await controller._load(generation=0)
    assert result.mode == "demo"
    assert controller.state is applied
    after = REGISTRY.get_sample_value("dashboard_stale_results_total")
    assert after == before + 1


@pytest.mark.asyncio
async def test_ad_stats_use_injected_instant(live_store: InMemoryRecordStore) -> None:
    controller = _controller(live_store)
    await controller.initialize()
    stats = controller.ad_stats()
    assert stats.active_count == 1
    assert stats.click_through_rate == 10.0
    assert controller.ad_stats(datetime(2026, 1, 1, tzinfo=timezone.utc)).expired_count == 1
