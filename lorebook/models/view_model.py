"""
Per-card view-models.

A CardViewModel joins a catalog card with the user's owned quantities and
wishlist membership. Only the reconciler mutates them; everything else
works on copies returned by snapshot().
"""

from dataclasses import dataclass, replace
from enum import Enum

from lorebook.models.card import Card


class PendingOperation(str, Enum):
    """Optimistic operation awaiting server confirmation."""

    NONE = "none"
    WISHLIST_TOGGLE = "wishlist_toggle"
    QUANTITY_CHANGE = "quantity_change"


class Variant(str, Enum):
    """Print variant tracked as a separate quantity."""

    NORMAL = "normal"
    FOIL = "foil"


@dataclass(slots=True)
class CardViewModel:
    """Display-ready card state."""

    card: Card
    normal_count: int = 0
    foil_count: int = 0
    in_wishlist: bool = False
    pending_operation: PendingOperation = PendingOperation.NONE

    @property
    def card_id(self) -> int:
        return self.card.id

    @property
    def owned(self) -> bool:
        return self.normal_count + self.foil_count > 0

    @property
    def is_pending(self) -> bool:
        return self.pending_operation is not PendingOperation.NONE

    def count(self, variant: Variant) -> int:
        """Copies owned of one variant."""
        return self.normal_count if variant == Variant.NORMAL else self.foil_count

    def set_count(self, variant: Variant, value: int) -> None:
        if variant == Variant.NORMAL:
            self.normal_count = value
        else:
            self.foil_count = value

    def snapshot(self) -> "CardViewModel":
        """Copy safe to hand to the view layer. Card is immutable and shared."""
        return replace(self)
