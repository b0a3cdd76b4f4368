from typing import Any, Dict, List

from storefront.config import CARTS_TABLE
from storefront.infra.tables import run


class CartRepository:
    """Table paniers, une ligne par (userEmail, productID)."""

    def __init__(self, client, table: str = CARTS_TABLE):
        self._client = client
        self.table = table

    def _table(self):
        return self._client.table(self.table)

    def upsert_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        rows = run(
            self._table().upsert(dict(item), on_conflict="userEmail,productID"),
            "cart.repository.upsert_item",
            user=item.get("userEmail"),
            product=item.get("productID"),
        )
        return rows[0] if rows else dict(item)

    def get_by_user(self, email: str) -> List[Dict[str, Any]]:
        if not email:
            return []
        return run(
            self._table().select("*").eq("userEmail", email),
            "cart.repository.get_by_user",
            user=email,
        )

    def delete_item(self, email: str, product_id: str) -> None:
        run(
            self._table().delete().eq("userEmail", email).eq("productID", product_id),
            "cart.repository.delete_item",
            user=email,
            product=product_id,
        )
