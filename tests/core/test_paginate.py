"""Offset Pagination — tests for from/to resolution and page links.

Tests cover:
    - absent bounds fall back to 0 and max_page_size
    - window is capped at max_page_size and clamped to start + limit
    - malformed, negative and inverted bounds are validation failures
    - next always follows the window; prev only when a full window fits before it
"""

import pytest

from payments_api.core.errors import RequestValidationFailed
from payments_api.core.paginate import (
    PageWindow, build_page_links, payment_link, resolve_page,
)

BASE = "http://test/v1"


# ─── resolve_page ────────────────────────────────────────────────

def test_absent_bounds_use_defaults():
    assert resolve_page(None, None, 20) == PageWindow(start=0, end=20, limit=20)


def test_absent_to_defaults_to_max_page_size():
    assert resolve_page("5", None, 20) == PageWindow(start=5, end=20, limit=15)


def test_from_past_default_to_is_rejected():
    with pytest.raises(RequestValidationFailed) as exc:
        resolve_page("30", None, 20)
    assert exc.value.field == "to"


def test_blank_bounds_are_treated_as_absent():
    assert resolve_page(" ", "", 5) == PageWindow(start=0, end=5, limit=5)


def test_window_is_capped_and_end_clamped():
    window = resolve_page("10", "500", 20)
    assert window == PageWindow(start=10, end=30, limit=20)


def test_small_window_is_kept():
    assert resolve_page("3", "5", 20) == PageWindow(start=3, end=5, limit=2)


@pytest.mark.parametrize("raw_from,raw_to,field", [
    ("abc", "5", "from"),
    ("0", "1.5", "to"),
    ("-1", "5", "from"),
    ("0", "-3", "to"),
])
def test_malformed_bounds_are_rejected(raw_from, raw_to, field):
    with pytest.raises(RequestValidationFailed) as exc:
        resolve_page(raw_from, raw_to, 20)
    assert exc.value.field == field
    assert exc.value.http_status == 400


@pytest.mark.parametrize("raw_from,raw_to", [("5", "3"), ("4", "4")])
def test_to_not_after_from_is_rejected(raw_from, raw_to):
    with pytest.raises(RequestValidationFailed):
        resolve_page(raw_from, raw_to, 20)


# ─── build_page_links ────────────────────────────────────────────

def test_self_link_renders_served_window():
    window = resolve_page("10", "500", 20)
    links = build_page_links(BASE, window)
    assert links["self"] == f"{BASE}/payments?from=10&to=30"
    assert links["next"] == f"{BASE}/payments?from=30&to=50"


def test_first_page_has_no_prev():
    links = build_page_links(BASE, PageWindow(start=0, end=20, limit=20))
    assert links == {
        "self": f"{BASE}/payments?from=0&to=20",
        "next": f"{BASE}/payments?from=20&to=40",
    }


def test_later_page_has_prev():
    links = build_page_links(BASE, PageWindow(start=20, end=40, limit=20))
    assert links["prev"] == f"{BASE}/payments?from=0&to=20"
    assert links["next"] == f"{BASE}/payments?from=40&to=60"


def test_prev_omitted_when_full_window_does_not_fit():
    links = build_page_links(BASE, PageWindow(start=5, end=15, limit=10))
    assert "prev" not in links


def test_payment_link_quotes_id():
    assert payment_link(BASE, "p1") == f"{BASE}/payments/p1"
    assert payment_link(BASE, "a/b c") == f"{BASE}/payments/a%2Fb%20c"
