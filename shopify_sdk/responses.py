from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
import json
import threading
from typing import Any, Mapping

import httpx

from .exceptions import RateLimitError, ResponseDecodingError, ResponseError, ShopifyError

CALL_LIMIT_HEADER = "X-Shopify-Shop-Api-Call-Limit"
RETRY_AFTER_HEADER = "Retry-After"


@dataclass
class RateLimitInfo:
    """Leaky bucket usage as last reported by Shopify."""

    request_count: int = 0
    bucket_size: int = 0
    retry_after_seconds: float = 0.0

    def update(self, headers: Mapping[str, str]) -> None:
        call_limit = _parse_call_limit(headers.get(CALL_LIMIT_HEADER))
        if call_limit is not None:
            self.request_count, self.bucket_size = call_limit
        self.retry_after_seconds = _parse_retry_after(headers.get(RETRY_AFTER_HEADER))


def check_response_error(response: httpx.Response) -> ShopifyError | None:
    """Return the error described by a failed response, or ``None`` on 2xx.

    Shopify's error payloads come in a few shapes::

        {"error": "bad request"}
        {"errors": "This action requires read_customers scope"}
        {"errors": ["not", "very good"]}
        {"errors": {"title": ["something is wrong"]}}

    The keyed form is flattened to ``["title: something is wrong"]``. When
    several keys are present, which one ends up as the primary message
    follows the order of the decoded object and should not be relied on.
    """
    status_code = response.status_code
    if 200 <= status_code < 300:
        return None

    body = response.content
    payload: Any = None
    # An empty body still describes an error; the status code carries it.
    if body:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            return ResponseDecodingError(body, str(exc), status_code)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return ResponseDecodingError(body, "error response body is not a JSON object", status_code)

    message = payload.get("error")
    if message is None:
        message = ""
    if not isinstance(message, str):
        return ResponseDecodingError(body, "error response field 'error' is not a string", status_code)

    message, errors = _flatten_errors(payload.get("errors"), message)
    return _wrap_specific_error(response, ResponseError(status_code, message, errors))


def _flatten_errors(raw: Any, message: str) -> tuple[str, list[str]]:
    errors: list[str] = []
    if raw is None:
        return message, errors
    if isinstance(raw, str):
        return raw, errors
    if isinstance(raw, list):
        errors = [_stringify(item) for item in raw]
        return ", ".join(errors), errors
    if isinstance(raw, dict):
        for key, value in raw.items():
            if isinstance(value, list):
                entries = [f"{key}: {_stringify(item)}" for item in value]
            elif isinstance(value, str):
                entries = [f"{key}: {value}"]
            else:
                continue
            if entries and not message:
                message = entries[0]
            errors.extend(entries)
    return message, errors


def _wrap_specific_error(response: httpx.Response, error: ResponseError) -> ResponseError:
    # see https://shopify.dev/docs/api/usage/response-codes
    if error.status_code == HTTPStatus.TOO_MANY_REQUESTS:
        retry_after = _parse_retry_after(response.headers.get(RETRY_AFTER_HEADER))
        return RateLimitError(error.status_code, error.message, error.errors, retry_after=int(retry_after))
    if error.status_code == HTTPStatus.NOT_ACCEPTABLE:
        return ResponseError(error.status_code, HTTPStatus.NOT_ACCEPTABLE.phrase, error.errors)
    return error


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _parse_retry_after(value: str | None) -> float:
    if value is None:
        return 0.0
    try:
        seconds = float(value)
    except ValueError:
        return 0.0
    # float() accepts "nan", "inf" and values too large for time.sleep.
    if seconds != seconds or abs(seconds) > threading.TIMEOUT_MAX:
        return 0.0
    return seconds


def _parse_call_limit(value: str | None) -> tuple[int, int] | None:
    if value is None:
        return None
    parts = value.split("/")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None
