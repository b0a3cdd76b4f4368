"""
Gestionnaires d'exceptions: traduit la taxonomie storefront.errors en réponses HTTP.
- 400: ValidationError, RequestValidationError (body/params invalides), WebhookVerificationError
- 404: NotFound
- 500: toute autre StorefrontError ou exception imprévue, avec un message fixe (le détail n'est que loggé)
"""
import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.errors import NotFound, StorefrontError, ValidationError, WebhookVerificationError

logger = logging.getLogger(__name__)

GENERIC_ERROR = {"err": "Something went wrong!"}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(WebhookVerificationError)
    async def webhook_error(request: Request, exc: WebhookVerificationError):
        logger.warning("Webhook rejected: %s", exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        logger.error("Erreur %s %s: %r", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content=GENERIC_ERROR)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Erreur inattendue %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=GENERIC_ERROR)
