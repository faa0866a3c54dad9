"""
Command-line collection sync.

Signs in, loads the reconciled collection (with list retry), logs the
collection statistics and signs out. Useful for checking an account or a
server deployment without the mobile app.

Usage:
    LOREBOOK_PASSWORD=... python -m lorebook.jobs.sync_collection --email me@example.com
"""

import argparse
import asyncio
import getpass
import logging
import os

from lorebook.client.catalog import CatalogClient
from lorebook.models.collection import CollectionStats
from lorebook.models.failure import CatalogError
from lorebook.services.reconciler import CollectionReconciler
from lorebook.services.session_state import SessionState

logger = logging.getLogger(__name__)

PASSWORD_ENV = "LOREBOOK_PASSWORD"


async def run_sync(
    email: str,
    password: str,
    set_id: int | None = None,
    client: CatalogClient | None = None,
) -> CollectionStats | None:
    """
    Load one user's collection and compute its statistics.

    Args:
        email: Account email
        password: Account password
        set_id: Restrict to one set. None loads every set.
        client: Optional catalog client (defaults to settings)

    Returns:
        CollectionStats, or None if login or loading failed
    """
    session_state = SessionState(client or CatalogClient())

    result = await session_state.login(email, password)
    if not result.ok or result.failure is not None:
        logger.error("Login failed: %s", result.failure.message if result.failure else "")
        return None

    try:
        reconciler = CollectionReconciler(session_state.client, session_state, set_id=set_id)
        await reconciler.reload(retry=True)
        stats = reconciler.stats()
    except CatalogError as e:
        logger.error("Could not load collection: %s", e.message)
        return None
    finally:
        await session_state.logout()

    logger.info(
        "%d unique cards, %d copies (%d normal, %d foil), %d wishlisted",
        stats.unique_cards,
        stats.total_quantity,
        stats.normal_copies,
        stats.foil_copies,
        stats.wishlist_count,
    )
    for progress in stats.set_progress.values():
        logger.info(
            "Set %d: %d/%d cards (%.1f%%)",
            progress.set_id,
            progress.owned_cards,
            progress.total_cards,
            progress.completion_percentage,
        )
    return stats


def main() -> None:
    """CLI entry point for the collection sync."""
    parser = argparse.ArgumentParser(description="Load and summarize a Lorcana collection")
    parser.add_argument("--email", required=True, help="Account email")
    parser.add_argument("--set", type=int, dest="set_id", help="Only load this set ID")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    password = os.environ.get(PASSWORD_ENV) or getpass.getpass("Password: ")
    stats = asyncio.run(run_sync(args.email, password, set_id=args.set_id))
    if stats is None:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
