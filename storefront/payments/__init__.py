"""
Module 'payments' (feature-first): point d'entrée public.
Réunit pricing (taxe, line items, livraison), client Stripe, annuaire d'identité et services.
"""

from .pricing import TAX_RATE, to_cents, unit_amount_with_tax, to_line_items, shipping_options
from .stripe_client import StripeGateway
from .customers import IdentityDirectory
from .service import create_checkout_session, build_sale, handle_webhook

__all__ = [
    # pricing
    "TAX_RATE",
    "to_cents",
    "unit_amount_with_tax",
    "to_line_items",
    "shipping_options",
    # stripe / identité
    "StripeGateway",
    "IdentityDirectory",
    # services
    "create_checkout_session",
    "build_sale",
    "handle_webhook",
]
