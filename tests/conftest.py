import pytest

from lorebook.client.catalog import CatalogClient
from lorebook.models.card import Card
from lorebook.models.session import Session, User

API = "https://api.test"


@pytest.fixture
def api_url() -> str:
    return API


@pytest.fixture
def catalog_client() -> CatalogClient:
    """Client pointed at the mocked API, current wire version."""
    return CatalogClient(base_url=API, timeout=2.0, wire_version="current")


@pytest.fixture
def user() -> User:
    return User(id=7, name="Ariel", email="ariel@example.com")


@pytest.fixture
def session(user: User) -> Session:
    return Session(token="tok-123", user=user)


@pytest.fixture
def sample_cards() -> list[Card]:
    """Three cards across two sets."""
    return [
        Card(
            id=1,
            name="Mickey Mouse - Brave Little Tailor",
            set_id=1,
            type="Character",
            rarity="Legendary",
            cost=8,
            power=5,
            ink="Steel",
            effect="Evasive",
        ),
        Card(
            id=2,
            name="Be Our Guest",
            set_id=1,
            type="Action - Song",
            rarity="Uncommon",
            cost=2,
            ink="Amber",
            effect="Look at the top 4 cards of your deck.",
        ),
        Card(
            id=3,
            name="Elsa - Spirit of Winter",
            set_id=2,
            type="Character",
            rarity="Legendary",
            cost=8,
            power=4,
            ink="Amethyst",
            lore="The cold never bothered her anyway.",
        ),
    ]
