"""
Wire schemas for the catalog API.

The server's payloads have drifted over time (image fields, owned-card ID
keys, list envelopes). These models absorb every observed variant and
convert to the typed domain models, so nothing past the client sees the
ambiguity.
"""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from lorebook.models.card import Card, CardSet
from lorebook.models.collection import OwnedQuantity
from lorebook.models.session import Session, User

# Observed image keys, in order of preference
IMAGE_KEYS = ("image_url", "imageUrl", "image", "artwork_url")


def unwrap(payload: Any) -> Any:
    """Strip the {"data": ...} envelope some endpoints add."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _optional_int(value: Any) -> int | None:
    """Lenient int for display stats; blanks and dashes become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CardPayload(_WireModel):
    """A card as any endpoint version returns it."""

    id: int
    name: str
    set_id: int | None = Field(default=None, validation_alias=AliasChoices("set_id", "setId"))
    image_url: str | None = None
    rarity: str | None = None
    type: str | None = None
    cost: int | None = None
    power: int | None = None
    ink: str | None = None
    effect: str | None = None
    lore: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _canonical_image(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        image = next((data[key] for key in IMAGE_KEYS if data.get(key)), None)
        cleaned = {key: value for key, value in data.items() if key not in IMAGE_KEYS}
        cleaned["image_url"] = image
        return cleaned

    @field_validator("cost", "power", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int | None:
        return _optional_int(value)

    @field_validator("lore", mode="before")
    @classmethod
    def _lore_text(cls, value: Any) -> str | None:
        # Some versions send the lore value as a number
        return None if value is None else str(value)

    def to_card(self) -> Card:
        return Card(
            id=self.id,
            name=self.name,
            set_id=self.set_id,
            image_url=self.image_url,
            rarity=self.rarity,
            type=self.type,
            cost=self.cost,
            power=self.power,
            ink=self.ink,
            effect=self.effect,
            lore=self.lore,
        )


class SetPayload(_WireModel):
    id: int
    name: str
    code: str | None = None
    card_count: int | None = Field(
        default=None,
        validation_alias=AliasChoices("card_count", "cards_count", "cardCount"),
    )
    release_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("release_date", "releaseDate"),
    )

    def to_set(self) -> CardSet:
        return CardSet(
            id=self.id,
            name=self.name,
            code=self.code,
            card_count=self.card_count,
            release_date=self.release_date,
        )


class OwnedPayload(_WireModel):
    """One /me/cards entry. Older versions key the card by "id"."""

    card_id: int = Field(validation_alias=AliasChoices("card_id", "cardId", "id"))
    normal: int = Field(default=0, ge=0)
    foil: int = Field(default=0, ge=0)

    @field_validator("normal", "foil", mode="before")
    @classmethod
    def _null_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    def to_owned(self) -> OwnedQuantity:
        return OwnedQuantity(card_id=self.card_id, normal_count=self.normal, foil_count=self.foil)


class UserPayload(_WireModel):
    id: int
    name: str
    email: str

    def to_user(self) -> User:
        return User(id=self.id, name=self.name, email=self.email)


class LoginPayload(_WireModel):
    token: str = Field(min_length=1)
    user: UserPayload

    def to_session(self) -> Session:
        return Session(token=self.token, user=self.user.to_user())


class ErrorPayload(_WireModel):
    message: str | None = None


CARD_LIST = TypeAdapter(list[CardPayload])
SET_LIST = TypeAdapter(list[SetPayload])
OWNED_LIST = TypeAdapter(list[OwnedPayload])
