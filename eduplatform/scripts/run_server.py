"""
Script de serveur de développement.

Lance l'API du tableau de bord avec uvicorn. Sans SUPABASE_URL / SUPABASE_ANON_KEY, le tableau de
bord démarre directement en mode démo.
"""

import uvicorn

from eduplatform.app.main import app
from eduplatform.core.container import container


def main():
    """Point d'entrée principal: sert l'application sur l'hôte et le port configurés."""
    settings = container.settings
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT, reload=False)


if __name__ == "__main__":
    main()
