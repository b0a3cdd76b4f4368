from typing import Optional
from supabase import create_client, Client
from storefront.config import SUPABASE_URL, SUPABASE_SERVICE_KEY


def build_service_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """
    Construit un client Supabase 'service-role' (tables, storage, auth admin).
    Appelé une seule fois au démarrage (lifespan); l'instance est ensuite injectée
    dans les repositories, pas de singleton global.
    """
    url = url or SUPABASE_URL
    key = key or SUPABASE_SERVICE_KEY
    if not url or not key:
        raise RuntimeError("SUPABASE_URL / SUPABASE_SERVICE_KEY manquants pour build_service_client()")
    return create_client(url, key)


def is_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_SERVICE_KEY)
