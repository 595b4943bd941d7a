"""Domain types for shoplist."""
import base64
import math
import random
import string
import time
from typing import NewType, Optional, List, Iterable, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


# Strong types for IDs
ItemId = NewType('ItemId', str)

DEFAULT_QUANTITY = "1"
DEFAULT_PRICE = "0"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def new_item_id(existing: Iterable[str] = ()) -> ItemId:
    """Create an id from the current epoch milliseconds and a random suffix.

    Args:
        existing: Ids already in use; the new id is guaranteed to differ

    Returns:
        A fresh item id
    """
    taken = set(existing)
    while True:
        suffix = "".join(random.choices(_ID_ALPHABET, k=9))
        candidate = f"{int(time.time() * 1000)}{suffix}"
        if candidate not in taken:
            return ItemId(candidate)


def parse_amount(value: Any, field: str = "value") -> float:
    """Parse a user supplied quantity or price.

    Accepts numbers and numeric strings (a decimal comma is allowed).

    Raises:
        ValueError: If the value is not a finite, non-negative number
    """
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            raise ValueError(f"{field} cannot be empty")
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"{field} must be a number, got '{value}'") from None
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"{field} must be a finite number")
    if number < 0:
        raise ValueError(f"{field} cannot be negative")
    return number


def format_amount(number: float) -> str:
    """Render a parsed amount as the decimal string stored on items."""
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def normalize_amount(value: Any, default: str, field: str) -> str:
    """Validate an amount for storage; blank input falls back to the default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, str):
        parse_amount(value, field)
        return value.strip().replace(",", ".")
    return format_amount(parse_amount(value, field))


class Item(BaseModel):
    """A shopping list or wishlist entry.

    Wishlist entries leave quantity and price unset.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: ItemId = Field(default_factory=new_item_id)
    product: str
    quantity: Optional[str] = None
    price: Optional[str] = None
    visible: bool = True
    price_uncertain: bool = Field(default=False, alias="priceUncertain")

    @field_validator('quantity', 'price', mode='before')
    @classmethod
    def amount_as_text(cls, v: Any) -> Any:
        """Older blobs may hold plain JSON numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return format_amount(v)
        return v

    @field_validator('product')
    @classmethod
    def product_must_not_be_empty(cls, v: str) -> str:
        """Validate that the product name has content."""
        if not v or not v.strip():
            raise ValueError('product cannot be empty')
        return v.strip()

    @property
    def is_wishlist_entry(self) -> bool:
        return self.quantity is None and self.price is None

    def line_total(self) -> float:
        """Price times quantity for this entry."""
        return parse_amount(self.price or DEFAULT_PRICE, "price") * parse_amount(
            self.quantity or DEFAULT_QUANTITY, "quantity"
        )

    def to_storage(self) -> dict:
        """Serialize to the JSON shape kept in the key-value store."""
        if self.is_wishlist_entry:
            return {"id": self.id, "product": self.product, "visible": self.visible}
        return self.model_dump(by_alias=True)


class CandidateItem(BaseModel):
    """An item proposed by extraction, before it enters a store.

    Numeric fields the model left out are empty strings.
    """
    product: str = ""
    quantity: str = ""
    price: str = ""


class AudioBlob(BaseModel):
    """Recorded audio ready to send to the remote model."""
    data: bytes
    mime_type: str = "audio/wav"

    @property
    def format(self) -> str:
        """Short format name, e.g. wav."""
        return self.mime_type.split("/")[-1]

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


class ChatMessage(BaseModel):
    """A single chat turn."""
    role: str
    content: str

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: str) -> str:
        allowed_roles = {'user', 'assistant'}
        if v not in allowed_roles:
            raise ValueError(f"role must be one of: {', '.join(sorted(allowed_roles))}")
        return v


def items_to_storage(items: List[Item]) -> List[dict]:
    """Serialize a list of items for persistence."""
    return [item.to_storage() for item in items]
