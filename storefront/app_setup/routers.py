"""
Registre central des routers (produits, panier, ventes, paiements, health).
"""
from fastapi import FastAPI
from storefront.products import views as products_views
from storefront.cart import views as cart_views
from storefront.sales import views as sales_views
from storefront.payments import views as payments_views
from storefront.health.router import router as health_router


def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    - L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    app.include_router(products_views.router)
    app.include_router(cart_views.router)
    app.include_router(sales_views.router)
    app.include_router(payments_views.router)
    app.include_router(health_router)
