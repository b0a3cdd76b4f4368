"""
Résolution client via le fournisseur d'identité (Supabase Auth, API admin).
Lit le nom d'affichage et l'adresse de livraison dans user_metadata pour pré-créer
le Customer Stripe.
"""
from typing import Any, Dict, Optional
import logging

from storefront.errors import CustomerLookupError, CustomerNotFound

logger = logging.getLogger(__name__)

PER_PAGE = 200
ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postal_code", "country")


class IdentityDirectory:
    def __init__(self, client):
        self._client = client

    def _find_user(self, email: str):
        wanted = email.strip().lower()
        page = 1
        while True:
            users = self._client.auth.admin.list_users(page=page, per_page=PER_PAGE) or []
            for user in users:
                if (getattr(user, "email", None) or "").lower() == wanted:
                    return user
            if len(users) < PER_PAGE:
                return None
            page += 1

    def lookup(self, email: str) -> Dict[str, Any]:
        """
        Retourne {"email", "name", "shipping"} pour l'utilisateur.
        - CustomerNotFound si aucun utilisateur ne correspond.
        - CustomerLookupError si l'API admin échoue.
        """
        try:
            user = self._find_user(email)
        except Exception as e:
            logger.exception("payments.customers.lookup failed email=%s", email)
            raise CustomerLookupError(f"Identity lookup failed for {email}") from e
        if user is None:
            raise CustomerNotFound(f"No identity record for {email}")
        meta = getattr(user, "user_metadata", None) or {}
        name = meta.get("full_name") or meta.get("name")
        return {"email": email, "name": name, "shipping": shipping_from_metadata(meta, name)}


def shipping_from_metadata(meta: Dict[str, Any], name: Optional[str]) -> Optional[Dict[str, Any]]:
    """Adresse au format Stripe {name, address{line1, city, ...}}; None si incomplète."""
    raw = meta.get("address") or {}
    if isinstance(raw, str):
        raw = {"line1": raw}
    address = {k: raw[k] for k in ADDRESS_FIELDS if raw.get(k)}
    if not address.get("line1"):
        return None
    return {"name": name or "", "address": address}
