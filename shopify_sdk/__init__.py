import logging

__version__ = "1.0.0"

from .client import App, ShopifyClient, ShopifyClientConfig
from .exceptions import (
    RateLimitError,
    ResponseDecodingError,
    ResponseError,
    ShopifyError,
)
from .log import configure_logging
from .responses import RateLimitInfo, check_response_error
from .shop import (
    fulfillment_path_prefix,
    metafield_path_prefix,
    shop_base_url,
    shop_full_name,
    shop_short_name,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "App",
    "ShopifyClient",
    "ShopifyClientConfig",
    "RateLimitError",
    "RateLimitInfo",
    "ResponseDecodingError",
    "ResponseError",
    "ShopifyError",
    "check_response_error",
    "configure_logging",
    "fulfillment_path_prefix",
    "metafield_path_prefix",
    "shop_base_url",
    "shop_full_name",
    "shop_short_name",
]
