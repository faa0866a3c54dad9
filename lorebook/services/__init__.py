"""
Lorebook services.

Session handling, collection reconciliation, and search over the
reconciled view-models.
"""

from lorebook.services.collection_search import (
    CardFilter,
    collection_stats,
    filter_cards,
    find_cards,
    search_cards,
)
from lorebook.services.list_loader import fetch_with_retry
from lorebook.services.reconciler import CollectionReconciler, rebuild
from lorebook.services.session_state import SessionState

__all__ = [
    "CardFilter",
    "CollectionReconciler",
    "SessionState",
    "collection_stats",
    "fetch_with_retry",
    "filter_cards",
    "find_cards",
    "rebuild",
    "search_cards",
]
