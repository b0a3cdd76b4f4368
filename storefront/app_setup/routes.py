"""
Routes simples (hors routers): liveness sur / et favicon sans contenu.
"""
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from starlette.status import HTTP_204_NO_CONTENT


def register_routes(app: FastAPI) -> None:
    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root():
        return "Server is live!"

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=HTTP_204_NO_CONTENT)
