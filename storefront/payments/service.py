"""
Cas d'usage 'payments': orchestre pricing, stripe, identité et registre des ventes.
"""
from typing import Any, Callable, Dict, List, Optional
import logging

from storefront.config import (
    CHECKOUT_ALLOWED_COUNTRIES,
    CHECKOUT_CANCEL_PATH,
    CHECKOUT_CUSTOMER_LOOKUP,
    CHECKOUT_SUCCESS_PATH,
    FRONTEND_URL,
)
from storefront.errors import WebhookVerificationError
from storefront.payments import pricing
from storefront.payments.customers import IdentityDirectory
from storefront.payments.models import CheckoutRequest
from storefront.payments.stripe_client import StripeGateway
from storefront.sales.models import utc_now_iso
from storefront.sales.repository import SalesRepository

logger = logging.getLogger(__name__)

COMPLETED_EVENT = "checkout.session.completed"


def redirect_urls(frontend_url: str = FRONTEND_URL) -> Dict[str, str]:
    # {CHECKOUT_SESSION_ID} est substitué par Stripe lors de la redirection
    base = frontend_url.rstrip("/")
    return {
        "success_url": f"{base}{CHECKOUT_SUCCESS_PATH}",
        "cancel_url": f"{base}{CHECKOUT_CANCEL_PATH}",
    }


def _resolve_customer(
    req: CheckoutRequest,
    gateway: StripeGateway,
    identities: Optional[IdentityDirectory],
    lookup: bool,
) -> Dict[str, str]:
    """
    Retourne {"customer": id} si un Customer Stripe a été pré-créé, sinon {"customer_email": email}.
    Priorité: adresse fournie dans la requête > annuaire d'identité (si activé) > email seul.
    """
    email = str(req.customerEmail)
    if req.shipping is not None:
        shipping = req.shipping.model_dump(exclude_none=True)
        customer_id = gateway.create_customer(email=email, name=req.shipping.name, shipping=shipping)
        return {"customer": customer_id}
    if lookup and identities is not None:
        identity = identities.lookup(email)
        customer_id = gateway.create_customer(
            email=email,
            name=identity.get("name"),
            shipping=identity.get("shipping"),
        )
        return {"customer": customer_id}
    return {"customer_email": email}


def create_checkout_session(
    req: CheckoutRequest,
    gateway: StripeGateway,
    identities: Optional[IdentityDirectory] = None,
    *,
    lookup: bool = CHECKOUT_CUSTOMER_LOOKUP,
    frontend_url: str = FRONTEND_URL,
) -> Dict[str, Any]:
    """
    Prépare la session Stripe Checkout à partir du panier et de l'email client.
    Étapes:
      1) résolution client (identité optionnelle) -> customer | customer_email
      2) line_items TTC (13%) en centimes
      3) session: mode payment, URLs de redirection, pays autorisés, options de livraison
    Aucune écriture locale: la vente est enregistrée à réception du webhook.
    Retour: {"id", "url"}
    """
    customer = _resolve_customer(req, gateway, identities, lookup)
    line_items = pricing.to_line_items(item.model_dump() for item in req.cartItems)
    session = gateway.create_session(
        line_items=line_items,
        mode="payment",
        shipping_address_collection={"allowed_countries": CHECKOUT_ALLOWED_COUNTRIES},
        shipping_options=pricing.shipping_options(),
        **redirect_urls(frontend_url),
        **customer,
    )
    logger.info(
        "payments.checkout session=%s items=%s email=%s",
        session.get("id"), len(line_items), req.customerEmail,
    )
    return session


def _shipping_address(session: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    details = session.get("shipping_details") or (session.get("collected_information") or {}).get("shipping_details")
    return (details or {}).get("address")


def _minor_to_major(amount: Any) -> float:
    return (amount or 0) / 100


def build_sale(session: Dict[str, Any], line_items: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Construit la vente à partir d'une session complétée et de ses line items.
    - saleId = id de session (une redélivrance écrase la même ligne)
    - montants convertis en unités majeures (amount / 100)
    """
    email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
    return {
        "saleId": session.get("id"),
        "userEmail": email,
        "totalAmount": _minor_to_major(session.get("amount_total")),
        "currency": session.get("currency"),
        "paymentStatus": "paid",
        "shippingAddress": _shipping_address(session),
        "timestamp": utc_now_iso(),
        "products": [
            {
                "productName": li.get("description"),
                "quantity": li.get("quantity"),
                "price": _minor_to_major(li.get("amount_total")),
            }
            for li in line_items
        ],
    }


def handle_webhook(
    payload: bytes,
    sig_header: Optional[str],
    gateway: StripeGateway,
    get_sales: Callable[[], SalesRepository],
) -> Dict[str, Any]:
    """
    Webhook Stripe.
    - Signature invalide: WebhookVerificationError (aucun effet de bord).
    - checkout.session.completed: line items -> vente -> upsert.
    - Autres types: acquittés, seulement loggés.
    - get_sales n'est appelé qu'après vérification de la signature.
    Une fois la session lue, répond toujours {"received": True}: un échec
    d'écriture est loggé, pas remonté (évite les retries Stripe).
    """
    event = gateway.parse_event(payload, sig_header)
    event_type = event.get("type")
    if event_type != COMPLETED_EVENT:
        logger.info("payments.webhook ignored type=%s id=%s", event_type, event.get("id"))
        return {"received": True}

    data = event.get("data")
    session = data.get("object") if isinstance(data, dict) else None
    if not isinstance(session, dict):
        raise WebhookVerificationError("Invalid webhook payload: missing checkout session")

    sales = get_sales()
    try:
        line_items = gateway.list_line_items(session.get("id"))
        sale = sales.upsert(build_sale(session, line_items))
        logger.info("payments.webhook sale recorded sale_id=%s items=%s", sale.get("saleId"), len(line_items))
    except Exception:
        logger.exception("payments.webhook failed to record sale session=%s", session.get("id"))
    return {"received": True}
