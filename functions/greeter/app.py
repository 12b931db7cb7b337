"""
FastAPI application for running the greeter API outside a serverless host.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from greeter.config import get_settings
from greeter.dependencies import get_settings_store
from greeter.router import HttpRequest, handle
from greeter.store import SettingsStore

ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Greeter Settings Service", version="0.1.0")

    async def forward(request: Request, store: SettingsStore) -> Response:
        body = await request.body()
        result = await run_in_threadpool(
            handle,
            HttpRequest(method=request.method, path=request.url.path, body=body),
            store,
            api_prefix=settings.api_prefix,
        )
        return Response(
            content=result.body,
            status_code=result.status_code,
            headers=result.headers,
        )

    @app.api_route("/{path:path}", methods=ROUTED_METHODS)
    async def dispatch(
        path: str,
        request: Request,
        store: SettingsStore = Depends(get_settings_store),
    ) -> Response:
        return await forward(request, store)

    @app.exception_handler(StarletteHTTPException)
    async def unrouted_method(request: Request, exc: StarletteHTTPException):
        # Methods outside ROUTED_METHODS never reach dispatch; answer them
        # through the router too so they get its 404 and headers.
        if exc.status_code != 405:
            return await http_exception_handler(request, exc)
        provider = request.app.dependency_overrides.get(
            get_settings_store, get_settings_store
        )
        return await forward(request, provider())

    return app


app = create_app()
