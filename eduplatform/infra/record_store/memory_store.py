"""
Store d'enregistrements en mémoire (utilisé pour dev/tests).

Les tables sont des listes de dict locales, non persistantes. Chaque opération peut être
programmée pour échouer (`fail_on`) ou pour attendre un évènement (`gate`), afin de reproduire
les pannes et les appels concurrents du store distant.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from eduplatform.domain.entities import Account, Session
from eduplatform.domain.records import map_account
from eduplatform.infra.record_store.base import NotFoundError, RecordStore, RecordStoreError


class InMemoryRecordStore(RecordStore):
    """Store mémoire: `profiles`, `courses` et `advertisements` indexés par table."""

    def __init__(
        self,
        *,
        session: Session | None = None,
        profiles: list[dict[str, Any]] | None = None,
        courses: list[dict[str, Any]] | None = None,
        advertisements: list[dict[str, Any]] | None = None,
        configured: bool = True,
    ) -> None:
        """Initialise les tables mémoire."""
        self.session = session
        self.profiles = {str(p["id"]): dict(p) for p in profiles or []}
        self.courses = [dict(c) for c in courses or []]
        self.advertisements = [dict(a) for a in advertisements or []]
        self.configured = configured
        self.fail_on: dict[str, RecordStoreError] = {}
        self.gate: asyncio.Event | None = None
        self.calls: list[str] = []

    @property
    def is_configured(self) -> bool:
        """Reflète l'option `configured` du constructeur."""
        return self.configured

    async def _enter(self, op: str) -> None:
        self.calls.append(op)
        if self.gate is not None:
            await self.gate.wait()
        error = self.fail_on.get(op)
        if error is not None:
            raise error

    async def get_session(self) -> Session | None:
        """Retourne la session programmée."""
        await self._enter("get_session")
        return self.session

    async def get_profile(self, user_id: str) -> Account | None:
        """Retourne le profil stocké ou lève `NotFoundError`."""
        await self._enter("get_profile")
        row = self.profiles.get(user_id)
        if row is None:
            raise NotFoundError(f"profile {user_id} not found")
        return map_account(row)

    async def query_courses(
        self, filters: Mapping[str, Any] | None = None, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Filtre par égalité stricte sur chaque clé de `filters`."""
        await self._enter("query_courses")
        wanted = dict(filters or {})
        rows = [c for c in self.courses if all(c.get(k) == v for k, v in wanted.items())]
        return [dict(r) for r in rows[:limit]]

    async def query_advertisements(self, limit: int = 20) -> list[dict[str, Any]]:
        """Retourne les premières annonces stockées."""
        await self._enter("query_advertisements")
        return [dict(a) for a in self.advertisements[:limit]]
