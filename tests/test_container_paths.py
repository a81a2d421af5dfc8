"""Tests pour les chemins de configuration du container.

Ce module teste le choix du store d'enregistrements selon les variables d'environnement.
"""

from __future__ import annotations

import importlib
from typing import Any

from eduplatform.infra.record_store.supabase_store import SupabaseRecordStore


def _new_container(monkeypatch: Any, env: dict[str, str]) -> Any:
    """Crée un nouveau container avec un environnement isolé."""
    for k in ["SUPABASE_URL", "SUPABASE_ANON_KEY"]:
        monkeypatch.delenv(k, raising=False)
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    mod = importlib.import_module("eduplatform.core.container")
    return mod.Container()


def test_container_demo_path(monkeypatch: Any) -> None:
    """Teste que le container passe en mode démo sans configuration Supabase."""
    c = _new_container(monkeypatch, {})
    assert c.storage_backend == "demo"
    assert c.record_store is None
    assert c.controller.store_configured is False


def test_container_supabase_path(monkeypatch: Any) -> None:
    """Teste que le container construit un store Supabase paresseux (aucun appel réseau)."""
    c = _new_container(
        monkeypatch,
        {
            "SUPABASE_URL": "https://demo.supabase.co",
            "SUPABASE_ANON_KEY": "anon-key",
            "STORE_TIMEOUT_SECONDS": "2.5",
        },
    )
    assert c.storage_backend == "supabase"
    assert isinstance(c.record_store, SupabaseRecordStore)
    assert c.record_store.timeout == 2.5
    assert c.controller.store_configured is True


def test_container_requires_both_values(monkeypatch: Any) -> None:
    c = _new_container(monkeypatch, {"SUPABASE_URL": "https://demo.supabase.co"})
    assert c.storage_backend == "demo"
