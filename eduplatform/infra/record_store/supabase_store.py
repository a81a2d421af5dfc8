"""
Store d'enregistrements adossé à Supabase (PostgREST + Auth).

Le client `supabase` est synchrone: chaque appel est exécuté dans un thread de travail sous
`asyncio.wait_for`, avec le délai configuré. Un délai dépassé ou une erreur réseau devient
`ConnectivityError`; une erreur PostgREST devient `QueryError` (ou `ConnectivityError` pour la
lecture de profil). Aucune nouvelle tentative n'est faite ici.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import structlog
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client, create_client

from eduplatform.app.metrics import RECORD_STORE_LATENCY
from eduplatform.domain.entities import Account, Session
from eduplatform.domain.records import map_account
from eduplatform.infra.record_store.base import (
    ConnectivityError,
    NotFoundError,
    QueryError,
    RecordStore,
)

log = structlog.get_logger(__name__)

T = TypeVar("T")

PROFILES_TABLE = "profiles"
COURSES_TABLE = "courses"
ADVERTISEMENTS_TABLE = "advertisements"


class SupabaseRecordStore(RecordStore):
    """Client Supabase à initialisation paresseuse (tables `profiles`, `courses`, `advertisements`)."""

    def __init__(
        self,
        url: str | None,
        key: str | None,
        *,
        timeout: float = 8.0,
        client: Client | None = None,
    ) -> None:
        """Mémorise l'URL, la clé et le délai; le client est créé au premier appel."""
        self.url = url
        self.key = key
        self.timeout = timeout
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Vrai si un client a été fourni, ou si URL et clé sont renseignées."""
        return self._client is not None or bool(self.url and self.key)

    @property
    def client(self) -> Client:
        """Get or create Supabase client with lazy initialization."""
        if self._client is None:
            try:
                self._client = create_client(self.url or "", self.key or "")
            except Exception as err:
                raise ConnectivityError(f"supabase initialization failed: {err}") from err
            log.info("supabase_client_initialized")
        return self._client

    async def _call(self, op: str, fn: Callable[[], T]) -> T:
        start = time.perf_counter()
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn), timeout=self.timeout)
        except asyncio.TimeoutError as err:
            raise ConnectivityError(f"{op} timed out after {self.timeout}s") from err
        finally:
            RECORD_STORE_LATENCY.labels(op=op).observe(time.perf_counter() - start)

    async def get_session(self) -> Session | None:
        """Lit la session Auth persistée par le client."""

        def _read():
            return self.client.auth.get_session()

        try:
            raw = await self._call("get_session", _read)
        except ConnectivityError:
            raise
        except Exception as err:
            raise ConnectivityError(f"session read failed: {err}") from err
        user = getattr(raw, "user", None)
        if raw is None or user is None:
            return None
        return Session(
            user_id=str(user.id),
            email=getattr(user, "email", None) or "",
            metadata=dict(getattr(user, "user_metadata", None) or {}),
        )

    async def get_profile(self, user_id: str) -> Account | None:
        """Charge la ligne `profiles` du compte."""

        def _read():
            return self.client.table(PROFILES_TABLE).select("*").eq("id", user_id).limit(1).execute()

        try:
            response = await self._call("get_profile", _read)
        except ConnectivityError:
            raise
        except Exception as err:
            raise ConnectivityError(f"profile read failed: {err}") from err
        rows = getattr(response, "data", None) or []
        if not rows:
            raise NotFoundError(f"profile {user_id} not found")
        return map_account(rows[0])

    async def query_courses(
        self, filters: Mapping[str, Any] | None = None, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Cours les plus vus correspondant aux égalités de `filters`."""

        def _read():
            query = self.client.table(COURSES_TABLE).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            return query.order("total_views", desc=True).limit(limit).execute()

        return await self._query("query_courses", _read)

    async def query_advertisements(self, limit: int = 20) -> list[dict[str, Any]]:
        """Annonces les plus récentes."""

        def _read():
            return (
                self.client.table(ADVERTISEMENTS_TABLE)
                .select("*")
                .order("start_date", desc=True)
                .limit(limit)
                .execute()
            )

        return await self._query("query_advertisements", _read)

    async def _query(self, op: str, fn: Callable[[], Any]) -> list[dict[str, Any]]:
        try:
            response = await self._call(op, fn)
        except ConnectivityError as err:
            raise QueryError(str(err)) from err
        except PostgrestAPIError as err:
            raise QueryError(f"{op} rejected: {err.message}") from err
        except Exception as err:
            raise QueryError(f"{op} failed: {err}") from err
        return list(getattr(response, "data", None) or [])
