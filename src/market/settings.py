"""Runtime settings for the Market context, read from the environment."""

import os

DEFAULT_PAGE_SIZE = 20


def page_size() -> int:
    """Listing page size, ``MARKET_PAGE_SIZE`` overrides the default."""
    raw = os.getenv("MARKET_PAGE_SIZE")
    if not raw:
        return DEFAULT_PAGE_SIZE
    try:
        size = int(raw)
    except ValueError:
        return DEFAULT_PAGE_SIZE
    return size if size > 0 else DEFAULT_PAGE_SIZE
