"""HTTP request handler for the registry proxy."""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from . import __version__
from .config import Config, SchemaMode
from .errors import error_chain, error_envelope
from .graphiql import GRAPHIQL_HTML
from .pipeline import Pipeline

logger = logging.getLogger(__name__)

RESPONSE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cache-Control": "no-cache, no-store, must-revalidate",
}

PREFLIGHT_HEADERS = {
    **RESPONSE_HEADERS,
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
}


def request_url(request: Request) -> str:
    """
    The request path and query string, with path escapes left undecoded.

    Starlette decodes ``request.url.path``; an escaped ``/`` or ``?`` inside a
    variant must not split segments or start the query string.
    """
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else quote(request.url.path)
    query = request.url.query
    return f"{path}?{query}" if query else path


def error_response(exc: BaseException) -> JSONResponse:
    """Render any pipeline failure as a GraphQL error envelope with status 200."""
    logger.warning("Request failed: %s", " <- ".join(error_chain(exc)))
    return JSONResponse(error_envelope(exc), status_code=200, headers=RESPONSE_HEADERS)


def create_app(cfg: Optional[Config] = None) -> FastAPI:
    """
    Create the proxy application.

    Args:
        cfg: Configuration; defaults to introspection mode against the public registry

    Returns:
        FastAPI application
    """
    pipeline = Pipeline(cfg)
    app = FastAPI(title="registry-proxy", version=__version__, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.pipeline = pipeline

    def execute(url: str, headers, body: bytes) -> dict:
        return pipeline.run_body(pipeline.target(url, headers), body).formatted

    def document(url: str, headers) -> str:
        return pipeline.document(pipeline.target(url, headers))

    def wants_document(request: Request) -> bool:
        return pipeline.mode is SchemaMode.DOCUMENT and pipeline.cfg.document_flag in request.query_params

    @app.api_route("/", methods=["GET", "POST", "OPTIONS"])
    @app.api_route("/{path:path}", methods=["GET", "POST", "OPTIONS"])
    async def handle(request: Request) -> Response:
        if request.method == "POST":
            body = await request.body()
            try:
                result = await run_in_threadpool(execute, request_url(request), request.headers, body)
            except Exception as e:
                return error_response(e)
            return JSONResponse(result, headers=RESPONSE_HEADERS)

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=PREFLIGHT_HEADERS)

        if wants_document(request):
            try:
                text = await run_in_threadpool(document, request_url(request), request.headers)
            except Exception as e:
                return error_response(e)
            return PlainTextResponse(text, headers=RESPONSE_HEADERS)

        return HTMLResponse(GRAPHIQL_HTML, headers=RESPONSE_HEADERS)

    return app
