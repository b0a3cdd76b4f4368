"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Construit le client Supabase, la passerelle Stripe et les repositories, rangés dans app.state
  (injectés ensuite par storefront.app_setup.dependencies).
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d'environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement le rate limiting (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l'init échoue
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from storefront.config import (
    STORAGE_BUCKET,
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
)
from storefront.infra import supabase_client
from storefront.cart.repository import CartRepository
from storefront.payments.customers import IdentityDirectory
from storefront.payments.stripe_client import StripeGateway
from storefront.products.images import ImageStore
from storefront.products.repository import ProductRepository
from storefront.sales.repository import SalesRepository

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")


def install_services(app: FastAPI, client, gateway: StripeGateway) -> None:
    """Range les clients construits dans app.state (une instance par process)."""
    images = ImageStore(client, STORAGE_BUCKET)
    app.state.images = images
    app.state.products = ProductRepository(client, images)
    app.state.cart = CartRepository(client)
    app.state.sales = SalesRepository(client)
    app.state.identities = IdentityDirectory(client)
    app.state.stripe = gateway


async def _init_rate_limiter(app: FastAPI) -> None:
    try:
        if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
            app.state.rate_limit_enabled = False
            logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
            return

        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        app.state.rate_limit_enabled = False
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            logger.warning(f"Rate limiting disabled due to init error: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Démarrage: services (si Supabase configuré) puis rate limiting.
    - Sans configuration Supabase, les routes de données répondent 500 (StoreUnavailable)
      mais l'app démarre (liveness, tests avec dependency_overrides).
    """
    gateway = StripeGateway(STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET)
    if supabase_client.is_configured():
        install_services(app, supabase_client.build_service_client(), gateway)
        logger.info("Supabase services ready")
    else:
        app.state.stripe = gateway
        logger.warning("SUPABASE_URL / SUPABASE_SERVICE_KEY not set: data routes unavailable")

    await _init_rate_limiter(app)
    yield
