"""
Request routing for the greeter API.

``handle`` is transport-neutral: the serverless entry point and the FastAPI
app both build an ``HttpRequest`` and return whatever ``HttpResponse`` comes
back.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Union

from pydantic import BaseModel, ValidationError

from greeter.errors import GreeterError, InvalidInputError
from greeter.schemas import (
    ErrorResponse,
    GreetingResponse,
    UpdateNamePayload,
    UpdateNameResponse,
)
from greeter.store import SettingsStore

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

Body = Union[str, bytes, None]


@dataclass
class HttpRequest:
    method: str
    path: str
    body: Body = None


@dataclass
class HttpResponse:
    status_code: int
    body: str = ""
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))

    def as_event_response(self) -> dict:
        """Shape expected back from a Netlify/Lambda style function."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }


def json_response(status_code: int, payload: Union[BaseModel, dict]) -> HttpResponse:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    return HttpResponse(status_code=status_code, body=json.dumps(payload))


def error_response(exc: GreeterError) -> HttpResponse:
    return json_response(exc.status_code, exc.payload)


def get_greeting(request: HttpRequest, store: SettingsStore) -> HttpResponse:
    suffix = store.get_suffix()
    return json_response(200, GreetingResponse(message=f"Hello, {suffix}!"))


def parse_update_payload(body: Body) -> UpdateNamePayload:
    try:
        data = json.loads(body or "")
    except ValueError as exc:
        logger.info("Error parsing request body: %s", exc)
        raise InvalidInputError(
            "Invalid input. Request body must be valid JSON."
        ) from exc
    try:
        return UpdateNamePayload.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(
            "Invalid input. 'name' field is required and must be a string."
        ) from exc


def update_name(request: HttpRequest, store: SettingsStore) -> HttpResponse:
    payload = parse_update_payload(request.body)
    store.set_suffix(payload.name)
    return json_response(
        200, UpdateNameResponse(message=f"Name suffix updated to {payload.name}.")
    )


Handler = Callable[[HttpRequest, SettingsStore], HttpResponse]


def build_routes(api_prefix: str) -> Dict[tuple[str, str], Handler]:
    prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
    return {
        (f"{prefix}/greeting", "GET"): get_greeting,
        (f"{prefix}/name", "POST"): update_name,
    }


def normalize_path(path: str) -> str:
    path = (path or "").split("?", 1)[0]
    return path.rstrip("/") or "/"


def match_route(path: str, method: str, api_prefix: str) -> Optional[Handler]:
    """Match on path suffix so any deployment prefix in front is accepted."""
    path = normalize_path(path)
    for (route_path, route_method), route_handler in build_routes(api_prefix).items():
        if method == route_method and path.endswith(route_path):
            return route_handler
    return None


def handle(
    request: HttpRequest, store: SettingsStore, *, api_prefix: str = "/api"
) -> HttpResponse:
    try:
        store.initialize()
    except GreeterError as exc:
        return error_response(exc)

    method = (request.method or "").upper()
    if method == "OPTIONS":
        return HttpResponse(status_code=204)

    route_handler = match_route(request.path, method, api_prefix)
    if route_handler is None:
        return json_response(404, ErrorResponse(error="Not Found"))

    try:
        return route_handler(request, store)
    except GreeterError as exc:
        logger.warning(
            "%s %s failed with %d: %s",
            method,
            request.path,
            exc.status_code,
            exc.message,
        )
        return error_response(exc)
