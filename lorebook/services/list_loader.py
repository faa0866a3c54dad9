"""Capped, delayed retry for list-loading screens."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from lorebook.config import LIST_RETRY_ATTEMPTS, LIST_RETRY_DELAY
from lorebook.models.failure import CatalogError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def fetch_with_retry(
    fetch: Callable[[], Awaitable[T]],
    attempts: int = LIST_RETRY_ATTEMPTS,
    delay: float = LIST_RETRY_DELAY,
) -> T:
    """
    Run a read, retrying transient failures a fixed number of times.

    Only ServiceUnavailable and NetworkUnreachable are retried. Everything
    else, and the last transient failure, propagates unchanged.

    Args:
        fetch: Zero-argument coroutine factory performing the read
        attempts: Retries after the first failure (never unbounded)
        delay: Seconds to wait before each retry

    Returns:
        The result of the first successful attempt
    """
    if attempts < 0:
        raise ValueError(f"attempts must be >= 0, got {attempts}")

    retries = 0
    while True:
        try:
            return await fetch()
        except CatalogError as e:
            if not e.transient or retries >= attempts:
                raise
            retries += 1
            logger.warning(
                "List load failed (%s); retry %d of %d in %.1fs",
                e.kind.value,
                retries,
                attempts,
                delay,
            )
            await asyncio.sleep(delay)
