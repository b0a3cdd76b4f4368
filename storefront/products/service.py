"""
Cas d'usage 'products': création avec images (multipart), mise à jour, suppression en cascade.
"""
from typing import Any, Dict, Sequence
import logging

from pydantic import ValidationError as PydanticValidationError

from storefront.errors import ValidationError
from storefront.products.images import ImageFile, check_image_count
from storefront.products.models import DeleteResult, Product
from storefront.products.repository import ProductRepository

logger = logging.getLogger(__name__)


def parse_product_field(raw: str) -> Product:
    """Le champ multipart 'product' est un texte JSON; erreur de parsing -> ValidationError."""
    try:
        return Product.model_validate_json(raw or "")
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid product payload: {e.errors(include_url=False)}") from e


def create_product(repo: ProductRepository, product: Product, files: Sequence[ImageFile]) -> Dict[str, Any]:
    """
    Crée (ou remplace) un produit avec ses images.
    Étapes:
      1) contrôle du nombre d'images avant tout upload (max 5)
      2) upload des images dans l'ordre reçu -> URLs publiques
      3) upsert de la fiche avec images = URLs uploadées (si des fichiers sont fournis)
    """
    check_image_count(len(files))
    data = product.model_dump()
    if files:
        data["images"] = repo.images.upload_many(files)
    stored = repo.upsert(data)
    logger.info("products.create id=%s images=%s", stored.get("id"), len(stored.get("images") or []))
    return stored


def update_product(repo: ProductRepository, product_id: str, product: Product) -> Dict[str, Any]:
    # L'id du chemin prime sur celui du body
    data = product.model_dump()
    data["id"] = product_id
    return repo.upsert(data)


def delete_product(repo: ProductRepository, product_id: str) -> DeleteResult:
    return repo.delete_by_id(product_id)
