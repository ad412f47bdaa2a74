from __future__ import annotations

import pytest

from shopify_sdk.shop import (
    fulfillment_path_prefix,
    metafield_path_prefix,
    shop_base_url,
    shop_full_name,
    shop_short_name,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("myshop", "myshop.myshopify.com"),
        ("myshop.", "myshop.myshopify.com"),
        (" myshop", "myshop.myshopify.com"),
        ("myshop ", "myshop.myshopify.com"),
        ("myshop \n", "myshop.myshopify.com"),
        ("myshop.myshopify.com", "myshop.myshopify.com"),
    ],
)
def test_shop_full_name(name: str, expected: str) -> None:
    assert shop_full_name(name) == expected


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("myshop", "myshop"),
        ("myshop.", "myshop"),
        (" myshop", "myshop"),
        ("myshop \n", "myshop"),
        ("myshop.myshopify.com", "myshop"),
        (".myshop.myshopify.com.", "myshop"),
    ],
)
def test_shop_short_name(name: str, expected: str) -> None:
    assert shop_short_name(name) == expected


def test_shop_base_url() -> None:
    assert shop_base_url("myshop") == "https://myshop.myshopify.com"


def test_metafield_path_prefix() -> None:
    assert metafield_path_prefix("", 0) == "metafields"
    assert metafield_path_prefix("products", 123) == "products/123/metafields"


def test_fulfillment_path_prefix() -> None:
    assert fulfillment_path_prefix("", 0) == "fulfillments"
    assert fulfillment_path_prefix("orders", 123) == "orders/123/fulfillments"
