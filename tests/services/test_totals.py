"""Tests for the running total."""
from shoplist.domain.types import Item
from shoplist.services.totals import calculate_total


def _item(price, quantity, visible=True):
    return Item(product="x", price=price, quantity=quantity, visible=visible)


def test_empty_total():
    """Test the total of no items."""
    assert calculate_total([]) == 0.0


def test_total_sums_visible_items():
    """Test price times quantity summed and rounded to cents."""
    items = [_item("45", "2"), _item("25", "1"), _item("80", "0.323")]
    assert calculate_total(items) == round(90 + 25 + 80 * 0.323, 2)


def test_hidden_items_contribute_nothing():
    """Test invisible items are excluded."""
    items = [_item("10", "1"), _item("99", "3", visible=False)]
    assert calculate_total(items) == 10.0


def test_rounding():
    """Test the total is rounded to two decimals."""
    assert calculate_total([_item("0.333", "3")]) == 1.0
    assert calculate_total([_item("1.005", "1"), _item("2.111", "1")]) == round(1.005 + 2.111, 2)


def test_unparseable_amounts_do_not_poison_total():
    """Test a malformed legacy value is skipped instead of producing NaN."""
    items = [_item("abc", "1"), _item("5", "2")]
    assert calculate_total(items) == 10.0


def test_wishlist_entries_count_as_zero():
    """Test entries without price count as zero."""
    assert calculate_total([Item(product="Tomates")]) == 0.0
