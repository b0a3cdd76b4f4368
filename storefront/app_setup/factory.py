"""
Factory d'application utilisée par les entrypoints (storefront.asgi, python -m storefront).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_request_logging_middleware
from .exceptions import register_exception_handlers
from .routes import register_routes
from .routers import register_routers


def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares (CORS, log des requêtes)
      - gestionnaires d'exceptions (taxonomie storefront.errors -> HTTP)
      - route de liveness et routers métier
    Retour:
      FastAPI prêt à être utilisé par le serveur ASGI.
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    register_request_logging_middleware(app)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
