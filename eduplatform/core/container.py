"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, store d'enregistrements, contrôleur de disponibilité)
et expose un singleton `container` utilisé par le reste de l'application.
"""

from eduplatform.core.settings import get_settings
from eduplatform.infra.record_store.base import RecordStore
from eduplatform.infra.record_store.supabase_store import SupabaseRecordStore
from eduplatform.services.data_availability import DataAvailabilityController


class Container:
    """Assemble les dépendances à partir des settings."""

    def __init__(self):
        self.settings = get_settings()
        self.record_store: RecordStore | None
        if self.settings.store_configured:
            self.record_store = SupabaseRecordStore(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_ANON_KEY,
                timeout=self.settings.STORE_TIMEOUT_SECONDS,
            )
            self.storage_backend = "supabase"
        else:
            # Absence de configuration: mode démo attendu, pas une erreur.
            self.record_store = None
            self.storage_backend = "demo"
        self.controller = DataAvailabilityController(
            self.record_store,
            course_limit=self.settings.DASHBOARD_COURSE_LIMIT,
            ad_limit=self.settings.DASHBOARD_AD_LIMIT,
        )


container = Container()
