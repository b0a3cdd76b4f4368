"""
Accès aux données pour la feature 'products' (table produits + images associées).
"""
from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

from storefront.config import PRODUCTS_TABLE
from storefront.errors import StoreUnavailable
from storefront.infra.tables import run
from storefront.products.images import ImageStore, key_from_url
from storefront.products.models import DeleteResult

logger = logging.getLogger(__name__)


class ProductRepository:
    def __init__(self, client, images: ImageStore, table: str = PRODUCTS_TABLE):
        self._client = client
        self.images = images
        self.table = table

    def _table(self):
        return self._client.table(self.table)

    def list_all(self) -> List[Dict[str, Any]]:
        return run(self._table().select("*"), "products.repository.list_all")

    def get_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        if not product_id:
            return None
        rows = run(
            self._table().select("*").eq("id", product_id).limit(1),
            "products.repository.get_by_id",
            id=product_id,
        )
        return rows[0] if rows else None

    def upsert(self, product: Dict[str, Any]) -> Dict[str, Any]:
        """
        Écrit la fiche complète (remplacement, pas de patch).
        - Génère un id (uuid4) si absent.
        - Retourne la ligne stockée (ou le payload si la table ne renvoie rien).
        """
        record = dict(product)
        if not record.get("id"):
            record["id"] = str(uuid4())
        record["images"] = list(record.get("images") or [])
        rows = run(
            self._table().upsert(record, on_conflict="id"),
            "products.repository.upsert",
            id=record["id"],
        )
        return rows[0] if rows else record

    def delete_by_id(self, product_id: str) -> DeleteResult:
        """
        Suppression en cascade: images d'abord (best-effort), puis la fiche.
        - Un échec de suppression d'image n'interrompt pas la suppression de la fiche.
        - Produit inconnu: no-op, pas d'erreur.
        """
        result = DeleteResult(id=product_id)
        product = self.get_by_id(product_id) or {}
        for url in product.get("images") or []:
            key = key_from_url(url)
            try:
                self.images.delete_one(key)
                result.deleted_images.append(key)
            except StoreUnavailable:
                result.failed_images.append(key)
        if result.partial:
            logger.warning(
                "products.repository.delete_by_id orphaned images id=%s keys=%s",
                product_id, result.failed_images,
            )
        run(
            self._table().delete().eq("id", product_id),
            "products.repository.delete_by_id",
            id=product_id,
        )
        return result
