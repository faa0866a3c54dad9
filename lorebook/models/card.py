from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Card:
    """
    A catalog card. Reference data owned by the server.

    Attributes:
        id: Server card ID
        name: Card name as printed
        set_id: ID of the set (chapter) the card belongs to
        image_url: Canonical image reference, already normalized from the
            wire variants
        rarity: Rarity label as the server reports it
        type: Type line (e.g., "Character", "Action - Song")
        cost: Ink cost to play
        power: Strength, for characters
        ink: Ink color (e.g., "Amber", "Steel")
        effect: Rules text
        lore: Flavor/lore text
    """

    id: int
    name: str
    set_id: int | None = None
    image_url: str | None = None
    rarity: str | None = None
    type: str | None = None
    cost: int | None = None
    power: int | None = None
    ink: str | None = None
    effect: str | None = None
    lore: str | None = None


@dataclass(frozen=True, slots=True)
class CardSet:
    """A release grouping of cards (a "chapter")."""

    id: int
    name: str
    code: str | None = None
    card_count: int | None = None
    release_date: str | None = None
