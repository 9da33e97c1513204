"""Query handling shared by the player and team aggregate endpoints."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from hoopstats.errors import InvalidInputError, StorageError

T = TypeVar("T")


def parse_bool_query(value: str | None) -> bool:
    """Accept 'true' or '1' (any case, surrounding whitespace ignored) as true."""
    if value is None:
        return False
    return value.strip().lower() in ("true", "1")


def resolve_season(season: str | None, career: str | None) -> str | None:
    """
    Decide which season an aggregate request covers.

    ``season`` and ``career`` are mutually exclusive. With neither, or with
    ``career`` alone, the whole career is aggregated (None).
    """
    if season and career:
        raise InvalidInputError.single(
            "query", "'season' and 'career' parameters are mutually exclusive"
        )
    return season or None


async def with_timeout(aw: Awaitable[T], timeout: float) -> T:
    """Await ``aw`` for at most ``timeout`` seconds; the work is cancelled on expiry."""
    try:
        return await asyncio.wait_for(aw, timeout=timeout)
    except TimeoutError as e:
        raise StorageError(f"request timed out after {timeout}s") from e
