from lorebook.client.adapters import (
    CurrentWireAdapter,
    LegacyWireAdapter,
    WireRequest,
    get_wire_adapter,
)
from lorebook.client.catalog import CatalogClient

__all__ = [
    "CatalogClient",
    "CurrentWireAdapter",
    "LegacyWireAdapter",
    "WireRequest",
    "get_wire_adapter",
]
