"""Adapter registry: the marketplaces capture knows how to read."""

from bookbundle.adapters.aladin import AladinCartAdapter
from bookbundle.adapters.base import PageAdapter

# Built-in adapters
_BUILTIN_ADAPTERS: list[PageAdapter] = [
    AladinCartAdapter(),
]

_custom_adapters: list[PageAdapter] = []


def get_all_adapters() -> list[PageAdapter]:
    """Return all registered adapters (built-in + custom)."""
    return _BUILTIN_ADAPTERS + _custom_adapters


def register_adapter(adapter: PageAdapter) -> None:
    """Register a custom adapter at runtime."""
    _custom_adapters.append(adapter)


def find_adapter(url: str) -> PageAdapter | None:
    """Return the first adapter whose marketplace owns ``url``."""
    for adapter in get_all_adapters():
        if adapter.matches_site(url):
            return adapter
    return None
