from __future__ import annotations

import base64
from dataclasses import dataclass, field, fields, is_dataclass, replace
from datetime import date, datetime
from http import HTTPStatus
import logging
import re
import threading
import time
from typing import Any, Mapping

import httpx

from . import __version__
from .exceptions import RateLimitError, ResponseDecodingError
from .responses import RateLimitInfo, check_response_error
from .shop import shop_base_url

logger = logging.getLogger(__name__)

USER_AGENT = f"shopify-sdk-python/{__version__}"
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"
API_VERSION_HEADER = "X-Shopify-API-Version"

# "stable" means no version has been pinned yet; Shopify answers with the
# oldest supported version and reports it in X-Shopify-API-Version.
DEFAULT_API_VERSION = "stable"
UNSTABLE_API_VERSION = "unstable"
DEFAULT_API_PATH_PREFIX = "admin"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0

_API_VERSION_RE = re.compile(r"^[0-9]{4}-[0-9]{2}$")


@dataclass(frozen=True)
class App:
    """Basic app settings: API key, secret, scope and redirect url."""

    api_key: str = ""
    api_secret: str = ""
    redirect_url: str = ""
    scope: str = ""
    password: str = ""

    def new_client(
        self,
        shop_name: str,
        token: str = "",
        *,
        http_client: httpx.Client | None = None,
        **config: Any,
    ) -> "ShopifyClient":
        cfg = ShopifyClientConfig(shop_name=shop_name, token=token, app=self, **config)
        return ShopifyClient(cfg, http_client=http_client)


@dataclass(frozen=True)
class ShopifyClientConfig:
    shop_name: str
    token: str = ""
    app: App = field(default_factory=App)
    api_version: str = DEFAULT_API_VERSION
    path_prefix: str = DEFAULT_API_PATH_PREFIX
    retries: int = 0
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    logger: logging.Logger | None = None


class ShopifyClient:
    """Client for one shop's Admin REST API.

    Every store needs its own client. Rate limit usage and the pinned API
    version are tracked per instance; concurrent calls on one instance
    update the rate limit counters last-write-wins.
    """

    def __init__(self, config: ShopifyClientConfig, *, http_client: httpx.Client | None = None) -> None:
        if config.api_version not in (DEFAULT_API_VERSION, UNSTABLE_API_VERSION) and not _API_VERSION_RE.match(
            config.api_version
        ):
            raise ValueError(f"invalid api_version {config.api_version!r}: expected YYYY-MM, stable or unstable")
        if config.retries < 0:
            raise ValueError("retries must be >= 0")
        if config.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._config = config
        self._log = config.logger or logger
        self._base_url = httpx.URL(shop_base_url(config.shop_name))
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(timeout=config.timeout_seconds)
        self._api_version = config.api_version
        self._version_lock = threading.Lock()
        self._rate_limits = RateLimitInfo()
        self.attempts = 0

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> "ShopifyClient":
        return self

    def __exit__(self, exc_type: Any, exc: Any, traceback: Any) -> None:
        self.close()

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def rate_limits(self) -> RateLimitInfo:
        return replace(self._rate_limits)

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def get(self, path: str, options: Any = None) -> Any:
        return self.create_and_do("GET", path, options=options)

    def post(self, path: str, data: Any) -> Any:
        return self.create_and_do("POST", path, data=data)

    def put(self, path: str, data: Any) -> Any:
        return self.create_and_do("PUT", path, data=data)

    def delete(self, path: str) -> None:
        self.create_and_do("DELETE", path)

    def count(self, path: str, options: Any = None) -> int:
        payload = self.get(path, options)
        if isinstance(payload, dict) and isinstance(payload.get("count"), int):
            return payload["count"]
        return 0

    def create_and_do(self, method: str, path: str, *, data: Any = None, options: Any = None) -> Any:
        """Build a request for ``path`` and execute it.

        ``data`` is sent as the JSON body for POST and PUT requests.
        ``options`` become query parameters, e.g. ``{"created_at_min": ...}``.
        Returns the decoded JSON response, or ``None`` for an empty body.
        """
        payload, _ = self.create_and_do_with_headers(method, path, data=data, options=options)
        return payload

    def create_and_do_with_headers(
        self,
        method: str,
        path: str,
        *,
        data: Any = None,
        options: Any = None,
    ) -> tuple[Any, httpx.Headers]:
        request = self.new_request(method, path, body=data, options=options)
        return self.do_with_headers(request)

    def new_request(self, method: str, path: str, body: Any = None, options: Any = None) -> httpx.Request:
        """Create a request for a path relative to the shop's API root.

        ``options`` are merged with any query string already in ``path``;
        values for a repeated key are all kept.
        """
        relative = httpx.URL(path.lstrip("/"))
        segments = [self._path_prefix(), relative.path.strip("/")]
        url = self._base_url.copy_with(path="/" + "/".join(s for s in segments if s))

        params = relative.params.multi_items()
        if options is not None:
            params = sorted(_query_pairs(options) + params, key=lambda pair: pair[0])

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        headers.update(self._auth_headers())

        return self._http.build_request(
            method,
            url,
            params=params or None,
            json=body,
            headers=headers,
        )

    def do(self, request: httpx.Request) -> Any:
        payload, _ = self.do_with_headers(request)
        return payload

    def do_with_headers(self, request: httpx.Request) -> tuple[Any, httpx.Headers]:
        """Send ``request``, retrying on 429 and 503 within the retry budget.

        Transport errors are raised as-is and never retried.
        """
        retries = self._config.retries
        self.attempts = 0
        self._log_request(request)

        while True:
            self.attempts += 1
            response = self._http.send(request)
            try:
                self._log_response(response)
                self._rate_limits.update(response.headers)
                error = check_response_error(response)
                if error is None:
                    self._pin_api_version(response)
                    return _decode_json(response), response.headers
            finally:
                response.close()

            if retries <= 1:
                raise error

            if isinstance(error, RateLimitError):
                wait = max(0, error.retry_after)
                self._log.debug("rate limited waiting %ss", wait)
                time.sleep(wait)
                retries -= 1
                continue

            if response.status_code == HTTPStatus.SERVICE_UNAVAILABLE:
                self._log.debug("service unavailable, retrying")
                retries -= 1
                continue

            raise error

    def _path_prefix(self) -> str:
        prefix = self._config.path_prefix.strip("/")
        version = self._api_version
        if version == UNSTABLE_API_VERSION or _API_VERSION_RE.match(version):
            return "/".join(part for part in (prefix, "api", version) if part)
        return prefix

    def _auth_headers(self) -> dict[str, str]:
        if self._config.token:
            return {ACCESS_TOKEN_HEADER: self._config.token}
        app = self._config.app
        if app.password:
            credentials = f"{app.api_key}:{app.password}".encode("utf-8")
            return {"Authorization": "Basic " + base64.b64encode(credentials).decode("ascii")}
        return {}

    def _pin_api_version(self, response: httpx.Response) -> None:
        version = response.headers.get(API_VERSION_HEADER)
        if not version:
            return
        with self._version_lock:
            if self._api_version != DEFAULT_API_VERSION:
                return
            self._api_version = version
        self._log.info("api version not set, now using %s", version)

    def _log_request(self, request: httpx.Request) -> None:
        self._log.debug("%s: %s", request.method, request.url)
        if request.content:
            self._log.debug("SENT: %s", request.content.decode("utf-8", errors="replace"))

    def _log_response(self, response: httpx.Response) -> None:
        self._log.debug("RECV %d: %s", response.status_code, response.reason_phrase)
        if response.content:
            self._log.debug("RESP: %s", response.text)


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ResponseDecodingError(response.content, str(exc), response.status_code) from exc


def _query_pairs(options: Any) -> list[tuple[str, str]]:
    if is_dataclass(options) and not isinstance(options, type):
        items = [(f.metadata.get("query", f.name), getattr(options, f.name)) for f in fields(options)]
    elif isinstance(options, Mapping):
        items = list(options.items())
    elif isinstance(options, (list, tuple)):
        items = []
        for item in options:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise TypeError(f"query options must be key/value pairs, got {item!r}")
            items.append((item[0], item[1]))
    else:
        raise TypeError(f"unsupported query options type: {type(options).__name__}")

    pairs: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), _query_value(v)) for v in value if v is not None)
        else:
            pairs.append((str(key), _query_value(value)))
    return pairs


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)
