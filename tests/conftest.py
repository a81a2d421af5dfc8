"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `eduplatform` en ajoutant la racine du projet
au sys.path, neutralise toute configuration Supabase locale (les tests ne touchent jamais le réseau)
et fournit une session et un store mémoire prêts à l'emploi.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from eduplatform...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Pas de .env local ni de store réel pendant les tests.
os.environ["ENV_FILE"] = os.devnull
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

from eduplatform.domain.entities import Session  # noqa: E402
from eduplatform.infra.record_store.memory_store import InMemoryRecordStore  # noqa: E402
from factories import make_ad_row, make_course_row  # noqa: E402


@pytest.fixture
def session() -> Session:
    """Session d'un instructeur connecté."""
    return Session(user_id="u1", email="ana@example.com", metadata={"name": "Ana Lima"})


@pytest.fixture
def live_store(session: Session) -> InMemoryRecordStore:
    """Store mémoire complet: session, profil premium, deux cours publiés, une annonce."""
    return InMemoryRecordStore(
        session=session,
        profiles=[
            {"id": "u1", "email": "ana@example.com", "name": "Ana Lima", "account_type": "premium"}
        ],
        courses=[
            make_course_row("c1", total_views=100, price=10.0),
            make_course_row("c2", total_views=200, price=20.0),
            make_course_row("draft", is_published=False, total_views=5000, price=99.0),
        ],
        advertisements=[make_ad_row("a1")],
    )
