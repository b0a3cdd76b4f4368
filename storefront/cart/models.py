# module storefront.cart.models
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.utils.validators import RawEmail


class CartItem(BaseModel):
    """Ligne de panier: clé composite (userEmail, productID) + champs produit dénormalisés."""
    model_config = ConfigDict(extra="allow")

    userEmail: RawEmail
    productID: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
