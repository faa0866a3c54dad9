"""
Versioned request shapes.

Endpoints whose request shape changed between server versions are built
here, so the client methods stay version-agnostic.
"""

from dataclasses import dataclass
from typing import Any, Literal

WireVersion = Literal["current", "legacy"]


@dataclass(frozen=True, slots=True)
class WireRequest:
    """Method, path and JSON body of one API call."""

    method: str
    path: str
    json: dict[str, Any] | None = None


class CurrentWireAdapter:
    """POST /wishlist/add and /wishlist/remove with a {card_id} body."""

    version: WireVersion = "current"

    def wishlist_add(self, card_id: int) -> WireRequest:
        return WireRequest("POST", "/wishlist/add", {"card_id": card_id})

    def wishlist_remove(self, card_id: int) -> WireRequest:
        return WireRequest("POST", "/wishlist/remove", {"card_id": card_id})

    def update_owned(self, card_id: int, normal_count: int, foil_count: int) -> WireRequest:
        return WireRequest(
            "POST",
            f"/me/{card_id}/update-owned",
            {"normal": normal_count, "foil": foil_count},
        )


class LegacyWireAdapter(CurrentWireAdapter):
    """Older servers: POST /wishlist with {cardId}, DELETE /wishlist/{id}."""

    version: WireVersion = "legacy"

    def wishlist_add(self, card_id: int) -> WireRequest:
        return WireRequest("POST", "/wishlist", {"cardId": card_id})

    def wishlist_remove(self, card_id: int) -> WireRequest:
        return WireRequest("DELETE", f"/wishlist/{card_id}")


_ADAPTERS: dict[str, type[CurrentWireAdapter]] = {
    "current": CurrentWireAdapter,
    "legacy": LegacyWireAdapter,
}


def get_wire_adapter(version: str) -> CurrentWireAdapter:
    """
    Get the adapter for a wire version.

    Raises:
        ValueError: If the version is unknown
    """
    try:
        return _ADAPTERS[version]()
    except KeyError:
        raise ValueError(
            f"Unknown wire version: {version}. Must be one of {sorted(_ADAPTERS)}"
        ) from None
