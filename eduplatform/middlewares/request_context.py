"""Middleware Starlette pour le contexte de requête.

Ce module ajoute un identifiant de requête (en-tête X-Request-ID, propagé dans les logs structlog)
et la durée de traitement (en-tête X-Process-Time-ms) sur chaque réponse HTTP.
"""

import time
from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware d'identifiant de requête et de mesure de durée.

    L'identifiant reçu est conservé; à défaut un UUID est généré. Il est lié aux contextvars
    structlog pendant le traitement, puis délié.
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Request-ID",
        timing_header: str = "X-Process-Time-ms",
    ) -> None:
        """Initialise le middleware avec les noms d'en-têtes.

        Args:
            app: Application ASGI à wrapper.
            header_name: Nom de l'en-tête HTTP pour l'ID de requête.
            timing_header: Nom de l'en-tête HTTP pour le temps de traitement.
        """
        super().__init__(app)
        self.header_name = header_name
        self.timing_header = timing_header

    async def dispatch(self, request, call_next: Callable):
        """Traite une requête en posant son identifiant et en mesurant sa durée.

        Args:
            request: Requête HTTP entrante.
            call_next: Fonction pour appeler le middleware suivant.

        Returns:
            Response: Réponse HTTP avec en-têtes d'identifiant et de durée.
        """
        request_id = request.headers.get(self.header_name) or str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers[self.header_name] = request_id
        response.headers[self.timing_header] = str(int((time.perf_counter() - start) * 1000))
        return response
