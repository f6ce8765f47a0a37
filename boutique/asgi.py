"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: uvicorn workers) importe `boutique.asgi:app`.
- Toute la configuration FastAPI (routers, middlewares, lifespan) est centralisée
  dans boutique.app_setup.factory, ce fichier ne fait qu'exposer l'instance `app`.
"""

from boutique.app import app
