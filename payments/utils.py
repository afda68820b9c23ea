from urllib.parse import urlencode

SENSITIVE_KEYS = ("apiKey", "api_key", "secret", "password", "token")


def mask_secret(value) -> str:
    return str(value)[:4] + "..."


def mask_secrets(data):
    """Return a copy of ``data`` with sensitive values cut to 4 chars + '...'.

    Walks nested dicts and lists. Anything that isn't a container is returned
    unchanged.
    """
    if isinstance(data, dict):
        return {
            k: (mask_secret(v) if k in SENSITIVE_KEYS and v is not None else mask_secrets(v))
            for k, v in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [mask_secrets(v) for v in data]
    return data


def first_present(data: dict, keys, default=""):
    """First non-empty value of ``keys`` in ``data``, else ``default``."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def with_query(url: str, **params) -> str:
    if not url:
        return url
    sep = "&" if "?" in url else "?"
    return url + sep + urlencode(params)


# --- order labels ---

def order_product_name(order, items) -> str:
    if len(items) == 1:
        return items[0].name
    return f"Order #{order.pk}"


def order_description(items) -> str:
    return ", ".join(f"{item.name} x {item.quantity}" for item in items)


def order_product_image(items) -> str:
    if not items:
        return ""
    return getattr(items[0], "image_url", "") or ""
