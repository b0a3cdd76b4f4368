"""
Logique de prix pure (pas de Stripe, pas de DB): taxe, line items et options de livraison.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from storefront.config import CHECKOUT_CURRENCY
from storefront.errors import ValidationError

# module storefront.payments.pricing
TAX_RATE = Decimal("0.13")

SHIPPING_RATES = (
    # (libellé, montant en centimes, délai min, délai max en jours ouvrés)
    ("Standard shipping", 0, 5, 7),
    ("Expedited shipping", 1500, 1, 3),
)


def to_cents(amount: Any) -> int:
    """Montant en unités majeures (str|float|int) -> centimes entiers, arrondi au plus proche."""
    try:
        value = Decimal(str(amount))
    except ArithmeticError as e:
        raise ValidationError(f"Invalid price: {amount!r}") from e
    if not value.is_finite():
        raise ValidationError(f"Invalid price: {amount!r}")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def unit_amount_with_tax(price: Any) -> int:
    """
    Prix unitaire TTC en centimes.
    - Arrondi du prix de base au centime d'abord, puis taxe de 13% appliquée en centimes (arrondie).
    - 10.00 -> 1000 + 130 = 1130
    """
    base = to_cents(price)
    tax = (Decimal(base) * TAX_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return base + int(tax)


def to_line_items(cart_items: Iterable[Dict[str, Any]], currency: str = CHECKOUT_CURRENCY) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir du panier.
    - cart_items: [{productName, price, quantity}, ...]
    - Soulève ValidationError si aucune ligne n'est fournie.
    """
    line_items: List[Dict[str, Any]] = []
    for item in cart_items or []:
        line_items.append({
            "quantity": int(item["quantity"]),
            "price_data": {
                "currency": currency,
                "unit_amount": unit_amount_with_tax(item["price"]),
                "product_data": {"name": item["productName"]},
            },
        })
    if not line_items:
        raise ValidationError("Cart is empty")
    return line_items


def shipping_options(currency: str = CHECKOUT_CURRENCY) -> List[Dict[str, Any]]:
    return [
        {
            "shipping_rate_data": {
                "type": "fixed_amount",
                "fixed_amount": {"amount": amount, "currency": currency},
                "display_name": label,
                "delivery_estimate": {
                    "minimum": {"unit": "business_day", "value": low},
                    "maximum": {"unit": "business_day", "value": high},
                },
            }
        }
        for label, amount, low, high in SHIPPING_RATES
    ]
