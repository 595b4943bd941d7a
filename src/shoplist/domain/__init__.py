"""Domain types for shoplist."""
from .types import (
    DEFAULT_PRICE,
    DEFAULT_QUANTITY,
    AudioBlob,
    CandidateItem,
    ChatMessage,
    Item,
    ItemId,
    new_item_id,
    normalize_amount,
    parse_amount,
)

__all__ = [
    'DEFAULT_PRICE',
    'DEFAULT_QUANTITY',
    'AudioBlob',
    'CandidateItem',
    'ChatMessage',
    'Item',
    'ItemId',
    'new_item_id',
    'normalize_amount',
    'parse_amount',
]
