# module storefront.sales.models
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from storefront.utils.validators import RawEmail


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SaleProduct(BaseModel):
    productName: str
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)


class Sale(BaseModel):
    """
    Vente enregistrée (webhook Stripe ou écriture admin).
    - saleId: accepte aussi l'alias historique 'salesId' en entrée; toujours stocké sous 'saleId'.
    - timestamp: ISO-8601 UTC, positionné à l'écriture si absent.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    saleId: Optional[str] = Field(default=None, validation_alias=AliasChoices("saleId", "salesId"))
    userEmail: RawEmail
    totalAmount: float = Field(ge=0)
    currency: str = "usd"
    paymentStatus: str = "paid"
    shippingAddress: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None
    products: List[SaleProduct] = Field(default_factory=list)
