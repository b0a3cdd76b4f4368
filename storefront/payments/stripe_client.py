"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
Une instance StripeGateway est construite au démarrage (clé privée + secret webhook)
et injectée dans les vues; aucun stripe.api_key global n'est positionné.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import stripe

from storefront.errors import PaymentProviderError, WebhookVerificationError

logger = logging.getLogger(__name__)


class StripeGateway:
    def __init__(self, api_key: str, webhook_secret: str = ""):
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_customer(
        self,
        *,
        email: str,
        name: Optional[str] = None,
        shipping: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Crée un Customer Stripe (email, nom, adresse de livraison) et retourne son id."""
        params: Dict[str, Any] = {"email": email}
        if name:
            params["name"] = name
        if shipping:
            params["shipping"] = shipping
        try:
            customer = stripe.Customer.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.exception("payments.stripe.create_customer failed email=%s", email)
            raise PaymentProviderError(str(e)) from e
        return customer["id"]

    def create_session(self, **params: Any) -> Dict[str, Any]:
        """
        Crée une session Stripe Checkout.
        - params: line_items, mode, success_url, cancel_url, shipping_options, customer|customer_email...
        Retour: {"id": "cs_test_...", "url": "https://checkout.stripe.com/..."}
        """
        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.exception("payments.stripe.create_session failed")
            raise PaymentProviderError(str(e)) from e
        return {"id": session["id"], "url": session["url"]}

    def list_line_items(self, session_id: str) -> List[Dict[str, Any]]:
        """Line items d'une session (description, quantity, amount_total en centimes)."""
        try:
            res = stripe.checkout.Session.list_line_items(session_id, api_key=self.api_key, limit=100)
        except stripe.StripeError as e:
            logger.exception("payments.stripe.list_line_items failed session=%s", session_id)
            raise PaymentProviderError(str(e)) from e
        return [
            {
                "description": li["description"],
                "quantity": li["quantity"],
                "amount_total": li["amount_total"],
            }
            for li in res["data"]
        ]

    def parse_event(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """
        Valide la signature (Stripe-Signature + secret webhook) puis décode l'événement.
        Retour: dict JSON de l'événement. Toute anomalie -> WebhookVerificationError.
        """
        if not self.webhook_secret:
            raise WebhookVerificationError("Webhook secret not configured")
        if not sig_header:
            raise WebhookVerificationError("Missing Stripe-Signature header")
        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, sig_header, self.webhook_secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE
            )
            event = json.loads(body)
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError(f"Webhook signature verification failed: {e}") from e
        except (UnicodeDecodeError, ValueError) as e:
            raise WebhookVerificationError("Invalid webhook payload") from e
        if not isinstance(event, dict):
            raise WebhookVerificationError("Invalid webhook payload: event must be a JSON object")
        return event
