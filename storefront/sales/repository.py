"""
Accès aux données pour la feature 'sales' (registre des ventes).
"""
from typing import Any, Dict, List
from uuid import uuid4

from storefront.config import SALES_TABLE
from storefront.infra.tables import run
from storefront.sales.models import utc_now_iso


class SalesRepository:
    def __init__(self, client, table: str = SALES_TABLE):
        self._client = client
        self.table = table

    def _table(self):
        return self._client.table(self.table)

    def upsert(self, sale: Dict[str, Any]) -> Dict[str, Any]:
        """
        Écrit la vente complète.
        - saleId généré (uuid4) si absent; 'salesId' est normalisé en 'saleId'.
        - timestamp positionné si absent.
        - Même saleId => écrasement (redélivrance webhook idempotente).
        """
        record = dict(sale)
        legacy_id = record.pop("salesId", None)
        record["saleId"] = record.get("saleId") or legacy_id or str(uuid4())
        record["timestamp"] = record.get("timestamp") or utc_now_iso()
        rows = run(
            self._table().upsert(record, on_conflict="saleId"),
            "sales.repository.upsert",
            sale_id=record["saleId"],
        )
        return rows[0] if rows else record

    def get_by_user(self, email: str) -> List[Dict[str, Any]]:
        """Ventes d'un client (filtre sur la colonne indexée userEmail)."""
        if not email:
            return []
        return run(
            self._table().select("*").eq("userEmail", email),
            "sales.repository.get_by_user",
            user=email,
        )

    def list_all(self) -> List[Dict[str, Any]]:
        return run(self._table().select("*"), "sales.repository.list_all")

    def delete_by_id(self, sale_id: str) -> None:
        run(
            self._table().delete().eq("saleId", sale_id),
            "sales.repository.delete_by_id",
            sale_id=sale_id,
        )
