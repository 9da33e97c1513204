"""Helpers shared by the SQL repositories."""

from collections.abc import Iterator
from contextlib import contextmanager

from hoopstats.errors import STORAGE_EXCEPTIONS, classify_storage_error
from hoopstats.models import Page

DEFAULT_PAGE_LIMIT = 50
MAX_OFFSET = 2**31 - 1


def sanitize_page(page: Page) -> Page:
    """Replace a non-positive limit with the default and clamp the offset into [0, MAX_OFFSET]."""
    limit = page.limit if page.limit > 0 else DEFAULT_PAGE_LIMIT
    offset = min(max(page.offset, 0), MAX_OFFSET)
    return Page(limit=limit, offset=offset)


@contextmanager
def storage_errors() -> Iterator[None]:
    """Classify SQLAlchemy and driver errors raised inside the block into domain errors."""
    try:
        yield
    except STORAGE_EXCEPTIONS as e:
        raise classify_storage_error(e) from e
