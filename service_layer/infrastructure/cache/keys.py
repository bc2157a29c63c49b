"""Cache key and tag builders. Single place for key format (DRY).

Key components (model names, extra context names, tag names) must not
contain CACHE_KEY_SEP to avoid ambiguous or colliding keys. Entry keys
and query strings are the trailing component, so they may contain it.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from service_layer.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_ENTRY,
    CACHE_PREFIX_EXTRA,
    CACHE_PREFIX_MODEL,
    CACHE_PREFIX_OFFICE,
    CACHE_PREFIX_TAG,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def office_tag(office_id: int) -> str:
    """Tag shared by every cache entry of an office."""
    return f"{CACHE_PREFIX_OFFICE}{CACHE_KEY_SEP}{int(office_id)}"


def model_tag(model: str) -> str:
    """Tag shared by every cache entry of a model type."""
    _validate_key_component(model, "model")
    return f"{CACHE_PREFIX_MODEL}{CACHE_KEY_SEP}{model}"


def extra_context_tag(model: str, context: str, office_id: int) -> str:
    """Tag of one extra (query-shaped) partition, e.g. paginated listings."""
    _validate_key_component(model, "model")
    _validate_key_component(context, "context")
    return (
        f"{CACHE_PREFIX_EXTRA}{CACHE_KEY_SEP}{model}{CACHE_KEY_SEP}"
        f"{context}{CACHE_KEY_SEP}{int(office_id)}"
    )


def tag_version_key(prefix: str, tag: str) -> str:
    """Store key holding the current version token of a tag."""
    _validate_key_component(prefix, "prefix")
    return f"{prefix}{CACHE_KEY_SEP}{CACHE_PREFIX_TAG}{CACHE_KEY_SEP}{tag}"


def entry_key(prefix: str, namespace: str, key: str) -> str:
    """Store key of one tagged entry (namespace is the digest of tag versions)."""
    _validate_key_component(prefix, "prefix")
    _validate_key_component(namespace, "namespace")
    return f"{prefix}{CACHE_KEY_SEP}{CACHE_PREFIX_ENTRY}{CACHE_KEY_SEP}{namespace}{CACHE_KEY_SEP}{key}"


def query_key(params: Mapping[str, Any]) -> str:
    """Serialize query parameters to a stable query string (sorted keys).

    Sequence values repeat the parameter (columns=id&columns=name);
    None values are dropped.
    """
    items = sorted((k, v) for k, v in params.items() if v is not None)
    return urlencode(items, doseq=True)
