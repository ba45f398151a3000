"""Offset Pagination — resolves from/to query parameters and renders page links.

Invariants:
    - Absent bounds default to from=0 and to=max_page_size, so from >= max_page_size
      without a to is an empty window and rejected
    - Non-integer or negative bounds, and to <= from, are validation failures
    - limit = min(to - from, max_page_size); the window end is clamped to from + limit
    - self renders the window actually served (after capping), not the raw query
    - next starts where the current window ends; prev is emitted when from >= limit

Design Decisions:
    - Pure offset arithmetic, no continuation tokens: concurrent inserts or deletes
      may shift what a window contains between two calls
"""

from dataclasses import dataclass
from urllib.parse import quote

from payments_api.core.errors import RequestValidationFailed


PAYMENTS_LINK = "/payments?from={}&to={}"
PAYMENT_LINK = "/payments/{}"


@dataclass(frozen=True)
class PageWindow:
    """The effective [start, end) window served by one list call."""
    start: int
    end: int
    limit: int


def _parse_bound(raw: str | None, name: str) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        raise RequestValidationFailed(f"'{name}' must be an integer", name) from None
    if value < 0:
        raise RequestValidationFailed(f"'{name}' must not be negative", name)
    return value


def resolve_page(
    raw_from: str | None, raw_to: str | None, max_page_size: int = 20,
) -> PageWindow:
    """Turn raw from/to query values into a bounded page window."""
    start = _parse_bound(raw_from, "from")
    if start is None:
        start = 0
    end = _parse_bound(raw_to, "to")
    if end is None:
        end = max_page_size

    limit = end - start
    if limit <= 0:
        raise RequestValidationFailed(
            f"'from' ({start}) must be lower than 'to' ({end})", "to",
        )
    limit = min(limit, max_page_size)
    return PageWindow(start=start, end=start + limit, limit=limit)


def build_page_links(base_url: str, window: PageWindow) -> dict[str, str]:
    """self/next always, prev only when a full window fits before start."""
    links = {
        "self": base_url + PAYMENTS_LINK.format(window.start, window.end),
        "next": base_url + PAYMENTS_LINK.format(window.end, window.end + window.limit),
    }
    if window.start >= window.limit:
        links["prev"] = base_url + PAYMENTS_LINK.format(
            window.start - window.limit, window.start,
        )
    return links


def payment_link(base_url: str, payment_id: str) -> str:
    return base_url + PAYMENT_LINK.format(quote(payment_id, safe=""))
