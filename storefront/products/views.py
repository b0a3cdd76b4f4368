# module storefront.products.views
"""Endpoints produits.
- Lecture: liste complète (pas de pagination) et fiche par id (404 si absente).
- Création multipart: champ 'product' (JSON texte) + jusqu'à 5 fichiers 'images'.
- Mise à jour: remplacement complet de la fiche (JSON), l'id du chemin fait foi.
- Suppression: fiche + images en cascade; les images non supprimées sont listées dans la réponse.
"""
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from storefront.app_setup.dependencies import get_product_repository
from storefront.errors import NotFound
from storefront.products import service as products_service
from storefront.products.images import ImageFile, check_image_count
from storefront.products.models import Product
from storefront.products.repository import ProductRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/products", tags=["Products"])


@router.get("")
def list_products(repo: ProductRepository = Depends(get_product_repository)):
    return repo.list_all()


@router.get("/{product_id}")
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    product = repo.get_by_id(product_id)
    if not product:
        raise NotFound("Product not found")
    return product


@router.post("")
def create_product(
    product: str = Form(...),
    images: Optional[List[UploadFile]] = File(None),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Crée/remplace un produit avec ses images.
    - 400 si plus de 5 images (aucun upload effectué) ou JSON produit invalide.
    """
    uploads = [f for f in (images or []) if f.filename]
    check_image_count(len(uploads))
    payload = products_service.parse_product_field(product)
    files = [
        ImageFile(
            filename=f.filename,
            content=f.file.read(),
            content_type=f.content_type or "application/octet-stream",
        )
        for f in uploads
    ]
    return products_service.create_product(repo, payload, files)


@router.put("/{product_id}")
def update_product(
    product_id: str,
    product: Product,
    repo: ProductRepository = Depends(get_product_repository),
):
    return products_service.update_product(repo, product_id, product)


@router.delete("/{product_id}")
def delete_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    result = products_service.delete_product(repo, product_id)
    return result.to_dict()
