"""Running total for the shopping list."""
from typing import Iterable

from shoplist.domain.types import Item
from shoplist.utils.logger import get_logger

logger = get_logger(__name__)


def calculate_total(items: Iterable[Item]) -> float:
    """Sum price times quantity over visible items, rounded to cents.

    Hidden items contribute nothing. An item whose amounts cannot be parsed
    contributes nothing either and is logged, so the total never turns into NaN.
    """
    total = 0.0
    for item in items:
        if not item.visible:
            continue
        try:
            total += item.line_total()
        except ValueError as e:
            logger.warning(
                "Skipping item with unparseable amounts",
                item_id=item.id,
                error=str(e)
            )
    return round(total, 2)
