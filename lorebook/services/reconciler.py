"""
Collection reconciler.

Joins the catalog, the user's owned quantities and the wishlist into one
CardViewModel per card, and keeps those view-models consistent while the
user edits them optimistically.

Per-card state:
    Confirmed -> Pending(kind) -> Confirmed | Confirmed (rolled back)

INVARIANT: A card has at most one pending operation. Another operation on
the same card is rejected with OperationInProgress, never dropped silently.

INVARIANT: A rollback restores the exact value seen before the operation.

INVARIANT: Every reload bumps the generation. Confirmations and failures
belonging to an older generation are discarded; they never touch the
rebuilt view-models.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from lorebook.client.catalog import CatalogClient
from lorebook.models.card import Card
from lorebook.models.collection import CollectionStats, OwnedQuantity
from lorebook.models.failure import (
    CardNotLoaded,
    OperationInProgress,
    StateAlreadyMatches,
    Unauthorized,
)
from lorebook.models.session import Session
from lorebook.models.view_model import CardViewModel, PendingOperation, Variant
from lorebook.services.collection_search import collection_stats
from lorebook.services.list_loader import fetch_with_retry
from lorebook.services.session_state import SessionState

logger = logging.getLogger(__name__)


def rebuild(
    cards: list[Card],
    owned: list[OwnedQuantity],
    wishlist: list[Card],
) -> list[CardViewModel]:
    """
    Join cards with owned quantities and wishlist membership.

    Pure function. Produces exactly one view-model per input card, in
    input order. Cards without an owned entry get zero of both variants;
    owned entries for cards not in `cards` are ignored.

    Args:
        cards: Catalog cards to display
        owned: Owned quantities, sparse or zero-filled
        wishlist: Wishlisted cards; presence means in_wishlist

    Returns:
        Fresh view-models with no pending operation
    """
    quantities = {q.card_id: q for q in owned}
    wishlisted = {card.id for card in wishlist}

    view_models: list[CardViewModel] = []
    for card in cards:
        quantity = quantities.get(card.id)
        view_models.append(
            CardViewModel(
                card=card,
                normal_count=quantity.normal_count if quantity else 0,
                foil_count=quantity.foil_count if quantity else 0,
                in_wishlist=card.id in wishlisted,
            )
        )
    return view_models


def _unique_cards(cards: list[Card]) -> list[Card]:
    """Drop repeated card IDs, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[Card] = []
    for card in cards:
        if card.id in seen:
            continue
        seen.add(card.id)
        unique.append(card)

    if len(unique) < len(cards):
        logger.warning("Dropped %d duplicate cards from catalog", len(cards) - len(unique))
    return unique


class CollectionReconciler:
    """
    Client-side view of which cards exist, which are owned and which are
    wishlisted.

    Operations run on one event loop; the view layer reads snapshots and
    sends intents, never mutating view-models itself.
    """

    def __init__(
        self,
        client: CatalogClient,
        session_state: SessionState,
        set_id: int | None = None,
    ) -> None:
        """
        Initialize the reconciler.

        Args:
            client: Remote catalog client
            session_state: Source of the session token
            set_id: Restrict the collection to one set. None loads every set.
        """
        self.client = client
        self.session_state = session_state
        self.set_id = set_id
        self._view_models: list[CardViewModel] = []
        self._by_id: dict[int, CardViewModel] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def _session(self) -> Session:
        return self.session_state.require()

    async def _fetch_cards(self, session: Session) -> list[Card]:
        if self.set_id is not None:
            return await self.client.list_set_cards(session, self.set_id)

        sets = await self.client.list_sets(session)
        per_set = await asyncio.gather(
            *(self.client.list_set_cards(session, card_set.id) for card_set in sets)
        )
        return [card for cards in per_set for card in cards]

    async def reload(self, retry: bool = False) -> list[CardViewModel]:
        """
        Fetch everything and rebuild the view-models from scratch.

        The three reads run concurrently; the rebuild waits for all of them.
        Any optimistic state is discarded.

        Args:
            retry: Retry transient failures a few times with a delay, as list
                screens do on first load

        Returns:
            Snapshot of the rebuilt view-models

        Raises:
            Unauthorized: If signed out or the token was rejected (the
                session is invalidated first)
            CatalogError: Any other classified failure; previous state is kept
        """
        session = self._session()

        async def fetch_all() -> tuple[list[Card], list[OwnedQuantity], list[Card]]:
            cards, owned, wishlist = await asyncio.gather(
                self._fetch_cards(session),
                self.client.list_user_cards(session),
                self.client.list_wishlist(session),
            )
            return cards, owned, wishlist

        try:
            if retry:
                cards, owned, wishlist = await fetch_with_retry(fetch_all)
            else:
                cards, owned, wishlist = await fetch_all()
        except Unauthorized:
            self.session_state.invalidate()
            raise

        self._generation += 1
        self._view_models = rebuild(_unique_cards(cards), owned, wishlist)
        self._by_id = {vm.card_id: vm for vm in self._view_models}

        logger.info(
            "Reloaded %d cards (generation %d, %d owned entries, %d wishlisted)",
            len(self._view_models),
            self._generation,
            len(owned),
            len(wishlist),
        )
        return self.snapshot()

    def snapshot(self) -> list[CardViewModel]:
        """Copies of every view-model, in catalog order."""
        return [vm.snapshot() for vm in self._view_models]

    def get(self, card_id: int) -> CardViewModel:
        """
        Copy of one view-model.

        Raises:
            CardNotLoaded: If the card is not in the loaded collection
        """
        return self._lookup(card_id).snapshot()

    def stats(self) -> CollectionStats:
        """Statistics over the loaded view-models."""
        return collection_stats(self._view_models)

    def _lookup(self, card_id: int) -> CardViewModel:
        try:
            return self._by_id[card_id]
        except KeyError:
            raise CardNotLoaded(card_id) from None

    def _is_current(self, vm: CardViewModel, generation: int) -> bool:
        return generation == self._generation and self._by_id.get(vm.card_id) is vm

    async def _apply(
        self,
        vm: CardViewModel,
        kind: PendingOperation,
        apply: Callable[[], None],
        restore: Callable[[], None],
        call: Callable[[Session], Awaitable[None]],
    ) -> CardViewModel:
        """
        Run one optimistic operation on a view-model.

        Applies the change, marks it pending, then awaits the server.
        Success and StateAlreadyMatches confirm; any other failure restores
        the previous value and propagates.
        """
        session = self._session()
        if vm.is_pending:
            raise OperationInProgress(vm.card_id)

        generation = self._generation
        vm.pending_operation = kind
        apply()

        try:
            await call(session)
        except StateAlreadyMatches as e:
            logger.info(
                "Card %d: server already matched %s (%s)",
                vm.card_id,
                kind.value,
                e.kind.value,
            )
        except Exception as e:
            if self._is_current(vm, generation):
                restore()
                logger.warning("Card %d: rolled back %s after %s", vm.card_id, kind.value, e)
            else:
                logger.info("Card %d: discarded stale %s failure", vm.card_id, kind.value)
            if isinstance(e, Unauthorized):
                self.session_state.invalidate()
            raise
        finally:
            vm.pending_operation = PendingOperation.NONE

        if self._is_current(vm, generation):
            return vm.snapshot()

        logger.info("Card %d: discarded stale %s confirmation", vm.card_id, kind.value)
        current = self._by_id.get(vm.card_id)
        return (current or vm).snapshot()

    async def toggle_wishlist(self, card_id: int) -> CardViewModel:
        """
        Flip a card's wishlist membership.

        Returns:
            Snapshot of the card after the server answered

        Raises:
            OperationInProgress: If the card already has a pending operation
            CatalogError: On failure, after the flip was rolled back
        """
        vm = self._lookup(card_id)
        previous = vm.in_wishlist
        wanted = not previous

        def apply() -> None:
            vm.in_wishlist = wanted

        def restore() -> None:
            vm.in_wishlist = previous

        async def call(session: Session) -> None:
            if wanted:
                await self.client.add_to_wishlist(session, card_id)
            else:
                await self.client.remove_from_wishlist(session, card_id)

        return await self._apply(vm, PendingOperation.WISHLIST_TOGGLE, apply, restore, call)

    async def change_quantity(self, card_id: int, variant: Variant, delta: int) -> CardViewModel:
        """
        Add or remove one copy of a variant.

        Decrementing at zero is a no-op and makes no network call. The
        untouched variant is sent unchanged.

        Args:
            card_id: Card to change
            variant: NORMAL or FOIL
            delta: +1 or -1

        Raises:
            ValueError: If delta is not +1 or -1, or variant is unknown
            OperationInProgress: If the card already has a pending operation
            CatalogError: On failure, after the count was restored
        """
        if delta not in (1, -1):
            raise ValueError(f"delta must be +1 or -1, got {delta}")
        variant = Variant(variant)

        vm = self._lookup(card_id)
        current = vm.count(variant)
        new_count = max(0, current + delta)
        if new_count == current:
            return vm.snapshot()

        normal = new_count if variant == Variant.NORMAL else vm.normal_count
        foil = new_count if variant == Variant.FOIL else vm.foil_count

        def apply() -> None:
            vm.set_count(variant, new_count)

        def restore() -> None:
            vm.set_count(variant, current)

        async def call(session: Session) -> None:
            await self.client.set_owned_quantity(session, card_id, normal, foil)

        return await self._apply(vm, PendingOperation.QUANTITY_CHANGE, apply, restore, call)

    async def set_quantity(self, card_id: int, normal_count: int, foil_count: int) -> CardViewModel:
        """
        Set both owned counts directly.

        Identical values make no network call.

        Raises:
            ValueError: If either count is negative
            OperationInProgress: If the card already has a pending operation
            CatalogError: On failure, after both counts were restored
        """
        if normal_count < 0 or foil_count < 0:
            raise ValueError(f"Counts must be non-negative, got {normal_count}/{foil_count}")

        vm = self._lookup(card_id)
        previous = (vm.normal_count, vm.foil_count)
        if previous == (normal_count, foil_count):
            return vm.snapshot()

        def apply() -> None:
            vm.normal_count, vm.foil_count = normal_count, foil_count

        def restore() -> None:
            vm.normal_count, vm.foil_count = previous

        async def call(session: Session) -> None:
            await self.client.set_owned_quantity(session, card_id, normal_count, foil_count)

        return await self._apply(vm, PendingOperation.QUANTITY_CHANGE, apply, restore, call)
