"""Tests for collection search, filters and statistics."""

import pytest

from lorebook.models.card import Card
from lorebook.models.collection import OwnedQuantity
from lorebook.models.view_model import CardViewModel
from lorebook.services.collection_search import (
    CardFilter,
    collection_stats,
    filter_cards,
    find_cards,
    search_cards,
)
from lorebook.services.reconciler import rebuild


@pytest.fixture
def view_models(sample_cards: list[Card]) -> list[CardViewModel]:
    """Mickey: 2 normal. Be Our Guest: 1 foil, wishlisted. Elsa: wishlisted."""
    owned = [
        OwnedQuantity(card_id=1, normal_count=2),
        OwnedQuantity(card_id=2, foil_count=1),
    ]
    return rebuild(sample_cards, owned, [sample_cards[1], sample_cards[2]])


def _ids(view_models: list[CardViewModel]) -> list[int]:
    return [vm.card_id for vm in view_models]


class TestSearchCards:
    def test_matches_name_case_insensitive(self, view_models: list[CardViewModel]) -> None:
        assert _ids(search_cards(view_models, "MICKEY")) == [1]

    def test_matches_type(self, view_models: list[CardViewModel]) -> None:
        assert _ids(search_cards(view_models, "song")) == [2]

    def test_matches_effect(self, view_models: list[CardViewModel]) -> None:
        assert _ids(search_cards(view_models, "evasive")) == [1]

    def test_matches_lore(self, view_models: list[CardViewModel]) -> None:
        assert _ids(search_cards(view_models, "bothered")) == [3]

    def test_every_term_must_match(self, view_models: list[CardViewModel]) -> None:
        """Terms are ANDed but may match different fields."""
        assert _ids(search_cards(view_models, "character winter")) == [3]
        assert search_cards(view_models, "character song") == []

    def test_blank_query_matches_all(self, view_models: list[CardViewModel]) -> None:
        assert _ids(search_cards(view_models, "   ")) == [1, 2, 3]


class TestFilterCards:
    @pytest.mark.parametrize(
        ("card_filter", "expected"),
        [
            (CardFilter.ALL, [1, 2, 3]),
            (CardFilter.OWNED, [1, 2]),
            (CardFilter.WISHLIST, [2, 3]),
            (CardFilter.NORMAL, [1]),
            (CardFilter.FOIL, [2]),
        ],
    )
    def test_filters(
        self,
        view_models: list[CardViewModel],
        card_filter: CardFilter,
        expected: list[int],
    ) -> None:
        assert _ids(filter_cards(view_models, card_filter)) == expected

    def test_find_combines_filter_and_search(self, view_models: list[CardViewModel]) -> None:
        assert _ids(find_cards(view_models, "legendary character", CardFilter.WISHLIST)) == []
        assert _ids(find_cards(view_models, "character", CardFilter.WISHLIST)) == [3]


class TestCollectionStats:
    def test_counts(self, view_models: list[CardViewModel]) -> None:
        stats = collection_stats(view_models)

        assert stats.unique_cards == 2
        assert stats.normal_copies == 2
        assert stats.foil_copies == 1
        assert stats.total_quantity == 3
        assert stats.normal_cards == 1
        assert stats.foil_cards == 1
        assert stats.wishlist_count == 2

    def test_set_progress(self, view_models: list[CardViewModel]) -> None:
        stats = collection_stats(view_models)

        first = stats.set_progress[1]
        assert (first.owned_cards, first.total_cards) == (2, 2)
        assert first.completion_percentage == 100.0

        second = stats.set_progress[2]
        assert (second.owned_cards, second.total_cards) == (0, 1)
        assert second.completion_percentage == 0.0

    def test_cards_without_set_skip_progress(self) -> None:
        stats = collection_stats(rebuild([Card(id=1, name="Loose")], [], []))

        assert stats.set_progress == {}

    def test_empty(self) -> None:
        stats = collection_stats([])

        assert stats.unique_cards == 0
        assert stats.total_quantity == 0
