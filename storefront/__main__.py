"""
Lancement local de l'API boutique: `python -m storefront`.

Variables lues:
- PORT (3000 par défaut, le port attendu par le front)
- HOST (0.0.0.0 par défaut)
- UVICORN_RELOAD=1 pour recharger le code à chaque modification
- LOG_LEVEL transmis à uvicorn
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "storefront.asgi:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        reload=os.getenv("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.getenv("LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
