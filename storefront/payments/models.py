# module storefront.payments.models
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.utils.validators import RawEmail


class CheckoutItem(BaseModel):
    productName: str = Field(min_length=1)
    price: float = Field(gt=0)
    quantity: int = Field(ge=1)


class ShippingAddress(BaseModel):
    line1: str = Field(min_length=1)
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class Shipping(BaseModel):
    name: str = Field(min_length=1)
    address: ShippingAddress


class CheckoutRequest(BaseModel):
    """Body de POST /create-checkout-session."""
    cartItems: List[CheckoutItem] = Field(min_length=1)
    customerEmail: RawEmail
    shipping: Optional[Shipping] = None
    # Informatif: Stripe recalcule le total à partir des line items
    total: Optional[float] = None
