"""Key/value store contract behind TaggedCache."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Async store of JSON-compatible values.

    Implementations raise on backend failure instead of reporting a miss;
    TaggedCache relies on set() and delete() having taken effect.
    """

    backend: str

    def is_available(self) -> bool: ...

    async def get(self, key: str) -> Any:
        """Return the stored value, or None when the key is missing or expired."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value; ttl None keeps it until deleted or evicted (tag versions)."""
        ...

    async def delete(self, key: str) -> None: ...
