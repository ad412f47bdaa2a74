from __future__ import annotations

from typing import Any


class ShopifyError(Exception):
    """Base SDK exception."""


class ResponseError(ShopifyError):
    """Raised for non-success Shopify API responses.

    Shopify reports errors either as a single message or as a list of
    messages, so both are kept. ``errors`` preserves the order the server
    sent them in.
    """

    def __init__(self, status_code: int, message: str = "", errors: list[str] | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.errors = list(errors or [])
        super().__init__(status_code, message, self.errors)

    def __str__(self) -> str:
        if self.message:
            return self.message
        joined = ", ".join(sorted(self.errors))
        if joined:
            return joined
        return "Unknown Error"

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self) -> int:
        return hash((type(self), self._fields()))

    def _fields(self) -> tuple[Any, ...]:
        return (self.status_code, self.message, tuple(self.errors))


class RateLimitError(ResponseError):
    """Rate limit exceeded (HTTP 429)."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        errors: list[str] | None = None,
        *,
        retry_after: int = 0,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(status_code, message, errors)

    def _fields(self) -> tuple[Any, ...]:
        return super()._fields() + (self.retry_after,)


class ResponseDecodingError(ShopifyError):
    """The response body from Shopify could not be parsed."""

    def __init__(self, body: bytes, message: str, status_code: int) -> None:
        super().__init__(body, message, status_code)
        self.body = body
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.body, self.message, self.status_code) == (other.body, other.message, other.status_code)

    def __hash__(self) -> int:
        return hash((type(self), self.body, self.message, self.status_code))
