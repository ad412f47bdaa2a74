from __future__ import annotations

SHOP_DOMAIN = "myshopify.com"


def shop_full_name(name: str) -> str:
    """Return the shop's myshopify domain, e.g. ``theshop.myshopify.com``."""
    name = name.strip().strip(".")
    if SHOP_DOMAIN in name:
        return name
    return f"{name}.{SHOP_DOMAIN}"


def shop_short_name(name: str) -> str:
    """Return the shop name without the ``.myshopify.com`` suffix."""
    return shop_full_name(name).replace(f".{SHOP_DOMAIN}", "")


def shop_base_url(name: str) -> str:
    return f"https://{shop_full_name(name)}"


def metafield_path_prefix(resource: str, resource_id: int) -> str:
    return _nested_path_prefix("metafields", resource, resource_id)


def fulfillment_path_prefix(resource: str, resource_id: int) -> str:
    return _nested_path_prefix("fulfillments", resource, resource_id)


def _nested_path_prefix(collection: str, resource: str, resource_id: int) -> str:
    if resource:
        return f"{resource}/{resource_id}/{collection}"
    return collection
