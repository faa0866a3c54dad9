"""
Collection search service.

Text search, list filters and statistics over reconciled view-models.
Works on snapshots; never touches the network.

Supports:
- "mickey" -> name, type, effect or lore contains "mickey"
- "steel song" -> every term must match somewhere on the card
- OWNED / WISHLIST / NORMAL / FOIL list filters
"""

from collections.abc import Iterable
from enum import Enum

from lorebook.models.collection import CollectionStats, SetProgress
from lorebook.models.view_model import CardViewModel


class CardFilter(str, Enum):
    """List filters offered by the card screens."""

    ALL = "all"
    OWNED = "owned"
    WISHLIST = "wishlist"
    NORMAL = "normal"
    FOIL = "foil"


def _searchable_text(view_model: CardViewModel) -> str:
    card = view_model.card
    fields = (card.name, card.type, card.effect, card.lore)
    return " ".join(f.lower() for f in fields if f)


def search_cards(view_models: Iterable[CardViewModel], query: str) -> list[CardViewModel]:
    """
    Search cards by free text.

    The query is split on whitespace; a card matches when every term
    occurs (case-insensitive) in its name, type, effect or lore.
    A blank query matches everything.
    """
    terms = query.lower().split()
    if not terms:
        return list(view_models)

    return [vm for vm in view_models if all(term in _searchable_text(vm) for term in terms)]


def filter_cards(
    view_models: Iterable[CardViewModel],
    card_filter: CardFilter = CardFilter.ALL,
) -> list[CardViewModel]:
    """Keep the cards matching one list filter. Order is preserved."""
    if card_filter is CardFilter.OWNED:
        return [vm for vm in view_models if vm.owned]
    if card_filter is CardFilter.WISHLIST:
        return [vm for vm in view_models if vm.in_wishlist]
    if card_filter is CardFilter.NORMAL:
        return [vm for vm in view_models if vm.normal_count > 0]
    if card_filter is CardFilter.FOIL:
        return [vm for vm in view_models if vm.foil_count > 0]
    return list(view_models)


def find_cards(
    view_models: Iterable[CardViewModel],
    query: str = "",
    card_filter: CardFilter = CardFilter.ALL,
) -> list[CardViewModel]:
    """Apply the list filter, then the text search."""
    return search_cards(filter_cards(view_models, card_filter), query)


def collection_stats(view_models: Iterable[CardViewModel]) -> CollectionStats:
    """
    Compute collection statistics.

    Set progress is only tracked for cards that carry a set ID.
    """
    stats = CollectionStats()

    for vm in view_models:
        stats.normal_copies += vm.normal_count
        stats.foil_copies += vm.foil_count
        if vm.owned:
            stats.unique_cards += 1
        if vm.normal_count > 0:
            stats.normal_cards += 1
        if vm.foil_count > 0:
            stats.foil_cards += 1
        if vm.in_wishlist:
            stats.wishlist_count += 1

        set_id = vm.card.set_id
        if set_id is None:
            continue
        progress = stats.set_progress.get(set_id)
        if progress is None:
            progress = SetProgress(set_id=set_id, owned_cards=0, total_cards=0)
            stats.set_progress[set_id] = progress
        progress.total_cards += 1
        if vm.owned:
            progress.owned_cards += 1

    return stats
