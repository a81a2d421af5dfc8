"""Interface de base pour les stores d'enregistrements distants.

Ce module définit l'interface abstraite du client de store (session, profils, cours, annonces) et
la taxonomie d'erreurs qu'il peut lever. Chaque appel est faillible indépendamment; l'appelant
décide du repli.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from eduplatform.domain.entities import Account, Session


class RecordStoreError(RuntimeError):
    """Erreur de base du store d'enregistrements."""


class ConnectivityError(RecordStoreError):
    """Store injoignable, délai dépassé ou réponse réseau invalide."""


class NotFoundError(RecordStoreError):
    """Enregistrement demandé absent."""


class QueryError(RecordStoreError):
    """Requête refusée ou en échec côté store."""


class RecordStore(ABC):
    """Interface abstraite du client de store.

    Les lignes de cours et d'annonces sont renvoyées brutes (dict): la conversion vers le schéma du
    domaine est faite une seule fois, à la frontière, par `eduplatform.domain.records`.
    """

    @property
    def is_configured(self) -> bool:
        """Indique si un point d'accès et des identifiants sont disponibles."""
        return True

    @abstractmethod
    async def get_session(self) -> Session | None:
        """Retourne la session courante, ou None (lève `ConnectivityError`)."""
        raise NotImplementedError

    @abstractmethod
    async def get_profile(self, user_id: str) -> Account | None:
        """Charge le profil d'un compte (lève `NotFoundError` ou `ConnectivityError`)."""
        raise NotImplementedError

    @abstractmethod
    async def query_courses(
        self, filters: Mapping[str, Any] | None = None, limit: int = 10
    ) -> list[dict[str, Any]]:
        """Retourne au plus `limit` lignes de cours égales à `filters` (lève `QueryError`)."""
        raise NotImplementedError

    @abstractmethod
    async def query_advertisements(self, limit: int = 20) -> list[dict[str, Any]]:
        """Retourne au plus `limit` lignes d'annonces (lève `QueryError`)."""
        raise NotImplementedError
