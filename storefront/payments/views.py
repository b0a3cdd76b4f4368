import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from storefront.app_setup.dependencies import (
    get_identity_directory,
    get_sales_repository,
    get_stripe_gateway,
)
from storefront.payments import service as payments_service
from storefront.payments.customers import IdentityDirectory
from storefront.payments.models import CheckoutRequest
from storefront.payments.stripe_client import StripeGateway
from storefront.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Payments"])

# module storefront.payments.views
@router.post("/create-checkout-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(
    req: CheckoutRequest,
    gateway: StripeGateway = Depends(get_stripe_gateway),
    identities: Optional[IdentityDirectory] = Depends(get_identity_directory),
):
    """
    Crée une session Checkout Stripe pour le panier transmis.
    - Entrée JSON: {"cartItems": [{productName, price, quantity}], "customerEmail": "...", "shipping"?, "total"?}
    - Rate limit: 10 req / 60s
    - Réponse: {"id", "url"} de la page de paiement hébergée
    - Erreurs: 400 si payload invalide, 500 si Stripe ou l'annuaire d'identité échoue
    """
    return payments_service.create_checkout_session(req, gateway, identities)


@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    gateway: StripeGateway = Depends(get_stripe_gateway),
):
    """
    Webhook Stripe: consomme checkout.session.completed pour enregistrer la vente.
    - Signature: body brut + en-tête Stripe-Signature (400 si invalide, aucun effet de bord)
    - Le registre des ventes n'est résolu qu'après la vérification de signature
    - Réponse: {"received": true} dès que la signature est valide
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    return await run_in_threadpool(
        payments_service.handle_webhook,
        payload,
        sig_header,
        gateway,
        lambda: get_sales_repository(request),
    )
