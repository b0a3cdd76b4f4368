"""
Dépendances FastAPI: exposent aux vues les services construits dans le lifespan.
Les tests les remplacent via app.dependency_overrides.
"""
from typing import Optional

from fastapi import Request

from storefront.cart.repository import CartRepository
from storefront.errors import StoreUnavailable
from storefront.payments.customers import IdentityDirectory
from storefront.payments.stripe_client import StripeGateway
from storefront.products.repository import ProductRepository
from storefront.sales.repository import SalesRepository


def _state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise StoreUnavailable(f"Service '{name}' not initialised")
    return service


def get_product_repository(request: Request) -> ProductRepository:
    return _state(request, "products")


def get_cart_repository(request: Request) -> CartRepository:
    return _state(request, "cart")


def get_sales_repository(request: Request) -> SalesRepository:
    return _state(request, "sales")


def get_stripe_gateway(request: Request) -> StripeGateway:
    return _state(request, "stripe")


def get_identity_directory(request: Request) -> Optional[IdentityDirectory]:
    # Optionnel: la résolution d'identité n'est utilisée que si activée
    return getattr(request.app.state, "identities", None)
