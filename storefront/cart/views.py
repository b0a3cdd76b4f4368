# module storefront.cart.views
from fastapi import APIRouter, Depends

from storefront.app_setup.dependencies import get_cart_repository
from storefront.cart.models import CartItem
from storefront.cart.repository import CartRepository

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.post("")
def add_cart_item(item: CartItem, repo: CartRepository = Depends(get_cart_repository)):
    """Ajoute ou remplace la ligne (userEmail, productID)."""
    repo.upsert_item(item.model_dump(mode="json", exclude_none=True))
    return {"message": "Item added to cart"}


@router.get("/{email}")
def get_cart(email: str, repo: CartRepository = Depends(get_cart_repository)):
    return repo.get_by_user(email)


@router.delete("/{email}/{product_id}")
def delete_cart_item(email: str, product_id: str, repo: CartRepository = Depends(get_cart_repository)):
    repo.delete_item(email, product_id)
    return {"message": "Item removed from cart"}
