# module storefront.sales.views
"""Endpoints du registre des ventes (administration).
- POST: écriture directe d'une vente (le flux normal passe par le webhook Stripe).
- GET: liste complète (scan) ou ventes d'un client.
- DELETE: suppression par saleId (idempotente).
"""
from fastapi import APIRouter, Depends

from storefront.app_setup.dependencies import get_sales_repository
from storefront.sales.models import Sale
from storefront.sales.repository import SalesRepository

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post("")
def record_sale(sale: Sale, repo: SalesRepository = Depends(get_sales_repository)):
    stored = repo.upsert(sale.model_dump(mode="json"))
    return {"message": "Sale recorded", "saleId": stored.get("saleId")}


@router.get("")
def list_sales(repo: SalesRepository = Depends(get_sales_repository)):
    return repo.list_all()


@router.get("/user/{email}")
def list_user_sales(email: str, repo: SalesRepository = Depends(get_sales_repository)):
    return repo.get_by_user(email)


@router.delete("/{sale_id}")
def delete_sale(sale_id: str, repo: SalesRepository = Depends(get_sales_repository)):
    repo.delete_by_id(sale_id)
    return {"message": "Sale deleted"}
