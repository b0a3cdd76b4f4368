from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["Health"])

SERVICES = ("products", "cart", "sales", "images", "identities", "stripe")


@router.get("")
def health_root(request: Request):
    state = request.app.state
    return {
        "ok": True,
        "services": {name: getattr(state, name, None) is not None for name in SERVICES},
        "rate_limit_enabled": getattr(state, "rate_limit_enabled", None),
    }
