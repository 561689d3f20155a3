"""
helm_push.response — Upload response interpretation.

201 is the only success. Otherwise the body is expected to be
{"error": "<message>"}; when it is not, the raw body is reported.
"""

from __future__ import annotations

import json
import logging

import requests

from helm_push.errors import ResponseReadError, ServerError

logger = logging.getLogger(__name__)


def handle_push_response(response: requests.Response) -> None:
    """Return on success, raise ServerError / ResponseReadError otherwise."""
    if response.status_code == 201:
        return

    try:
        body = response.content
    except requests.RequestException as e:
        raise ResponseReadError(f"cannot read response body: {e}") from e
    finally:
        response.close()

    text = body.decode("utf-8", errors="replace")
    logger.debug("Upload rejected with status %d: %s", response.status_code, text)

    try:
        data = json.loads(text)
    except ValueError:
        data = None

    message = ""
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        message = data["error"]

    if not message:
        raise ServerError(response.status_code, text)
    raise ServerError(response.status_code, message)
