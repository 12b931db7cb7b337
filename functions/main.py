# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

# Serverless function for the greeter API.
#
# Deployed as a Netlify/Lambda style function: the platform calls
# handler(event, context) and expects a {statusCode, headers, body} dict back.
# The SQLite file lives under /tmp and only survives as long as the instance.

# Standard library imports
import base64
import binascii
import logging
from typing import Any, Optional

# Local application imports
from greeter.config import get_settings
from greeter.dependencies import get_settings_store
from greeter.errors import InvalidInputError
from greeter.router import HttpRequest, HttpResponse, error_response, handle

logger = logging.getLogger(__name__)


def _decode_body(event: dict) -> Optional[str]:
    body = event.get("body")
    if body is None or not event.get("isBase64Encoded"):
        return body
    try:
        return base64.b64decode(body).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise InvalidInputError(
            "Invalid input. Request body must be valid JSON."
        ) from exc


def _request_from_event(event: dict) -> HttpRequest:
    return HttpRequest(
        method=event.get("httpMethod") or "GET",
        path=event.get("path") or "/",
        body=_decode_body(event),
    )


def handler(event: dict, context: Any = None) -> dict:
    """Entry point invoked by the hosting platform for every request."""
    try:
        request = _request_from_event(event)
    except InvalidInputError as exc:
        response: HttpResponse = error_response(exc)
    else:
        logger.info("%s %s", request.method, request.path)
        response = handle(
            request, get_settings_store(), api_prefix=get_settings().api_prefix
        )
    return response.as_event_response()
