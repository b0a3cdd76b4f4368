"""
Exécution des requêtes PostgREST (Supabase) avec traduction des erreurs.
- Toute erreur transport/API devient StoreUnavailable (loggée avec le contexte).
- Retourne toujours une liste de lignes (jamais None).
"""
from typing import Any, Dict, List
import logging

from storefront.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def run(query, action: str, **context: Any) -> List[Dict[str, Any]]:
    try:
        res = query.execute()
    except Exception as e:
        logger.exception("%s failed %s", action, context)
        raise StoreUnavailable(f"{action} failed") from e
    rows = getattr(res, "data", None) or []
    return rows if isinstance(rows, list) else [rows]
