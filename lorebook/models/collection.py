from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class OwnedQuantity:
    """
    Copies of one card owned by the user.

    Absent entries mean zero of both. Entries are zeroed, never deleted.
    """

    card_id: int
    normal_count: int = 0
    foil_count: int = 0

    def __post_init__(self) -> None:
        if self.normal_count < 0 or self.foil_count < 0:
            raise ValueError(
                f"Card {self.card_id} has negative quantity "
                f"(normal={self.normal_count}, foil={self.foil_count})"
            )

    @property
    def owned(self) -> bool:
        """True if at least one copy of either variant is owned."""
        return self.normal_count + self.foil_count > 0

    def total(self) -> int:
        """Copies of both variants."""
        return self.normal_count + self.foil_count


@dataclass
class SetProgress:
    """How much of one set the user owns."""

    set_id: int
    owned_cards: int
    total_cards: int

    @property
    def completion_percentage(self) -> float:
        if self.total_cards == 0:
            return 0.0
        return self.owned_cards / self.total_cards * 100


@dataclass
class CollectionStats:
    """
    Aggregate numbers for a user's collection.

    Attributes:
        unique_cards: Cards with at least one copy of either variant
        normal_copies: Sum of normal copies
        foil_copies: Sum of foil copies
        normal_cards: Cards with at least one normal copy
        foil_cards: Cards with at least one foil copy
        wishlist_count: Cards on the wishlist
        set_progress: Per-set ownership, keyed by set ID
    """

    unique_cards: int = 0
    normal_copies: int = 0
    foil_copies: int = 0
    normal_cards: int = 0
    foil_cards: int = 0
    wishlist_count: int = 0
    set_progress: dict[int, SetProgress] = field(default_factory=dict)

    @property
    def total_quantity(self) -> int:
        """Copies of every variant."""
        return self.normal_copies + self.foil_copies
