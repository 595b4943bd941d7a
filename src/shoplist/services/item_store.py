"""In-memory item lists persisted to the key-value store."""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence
from pydantic import ValidationError

from shoplist.domain.types import (
    DEFAULT_PRICE,
    DEFAULT_QUANTITY,
    CandidateItem,
    Item,
    ItemId,
    items_to_storage,
    new_item_id,
    normalize_amount,
)
from .base_service import BaseService, Result
from .storage import KeyValueStore, SHOPPING_LIST_KEY, WISHLIST_KEY
from .totals import calculate_total


class ItemStore(BaseService, ABC):
    """Ordered list of items, newest first.

    Every mutation updates the in-memory list first and then writes the whole
    list under ``storage_key``. A failed write is logged; the in-memory list
    stays authoritative.
    """

    storage_key: str = ""

    def __init__(self, storage: KeyValueStore):
        super().__init__()
        self.storage = storage
        self._items: List[Item] = []

    @property
    def items(self) -> List[Item]:
        """A copy of the current items."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> Optional[Item]:
        """Find an item by id."""
        return next((i for i in self._items if i.id == item_id), None)

    def _index_of(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def _persist(self) -> Result[str]:
        result = self.storage.set_json(self.storage_key, items_to_storage(self._items))
        if not result.success:
            self.logger.error(
                "Failed to persist items",
                key=self.storage_key,
                count=len(self._items)
            )
        return result

    def _restore(self, raw: dict) -> Item:
        """Build an item from a stored entry; subclasses fill in defaults."""
        return Item.model_validate(raw)

    def load(self) -> Result[List[Item]]:
        """Replace the in-memory list with the persisted one.

        Entries that cannot be read are skipped; a corrupt blob leaves the
        store empty.
        """
        try:
            stored = self.storage.get_json(self.storage_key)
        except ValueError:
            self.logger.exception("Stored items are not valid JSON", key=self.storage_key)
            self._items = []
            return Result.fail("Failed to load saved items")

        if stored is None:
            self._items = []
            return Result.ok([])
        if not isinstance(stored, list):
            self.logger.error("Stored items are not a list", key=self.storage_key)
            self._items = []
            return Result.fail("Failed to load saved items")

        items: List[Item] = []
        seen: set = set()
        for raw in stored:
            if not isinstance(raw, dict):
                self.logger.warning("Skipping stored entry that is not an object", key=self.storage_key)
                continue
            try:
                item = self._restore(raw)
            except ValidationError as e:
                self.logger.warning(
                    "Skipping invalid stored entry",
                    key=self.storage_key,
                    error=str(e)
                )
                continue
            if item.id in seen:
                item = item.model_copy(update={"id": new_item_id(seen)})
            seen.add(item.id)
            items.append(item)

        self._items = items
        self._log_action("load", key=self.storage_key, count=len(items))
        return Result.ok(self.items)

    def _new_id(self, taken: Iterable[str] = ()) -> ItemId:
        return new_item_id([*(i.id for i in self._items), *taken])

    @abstractmethod
    def _build(self, product: str, quantity=None, price=None, taken: Iterable[str] = ()) -> Item:
        """Create a new entry; ids in ``taken`` are avoided as well."""

    def add(self, product: str, quantity=None, price=None) -> Result[Item]:
        """
        Add an item at the top of the list.

        Args:
            product: Display name
            quantity: Quantity (ignored by the wishlist)
            price: Unit price (ignored by the wishlist)

        Returns:
            Result containing the created item or error
        """
        name_result = self._validate_name(product)
        if not name_result.success:
            return Result.fail(name_result.error, name_result.suggestions)
        try:
            item = self._build(name_result.data, quantity, price)
        except ValueError as e:
            return Result.fail(str(e), suggestions=["Use a number like 2 or 1.5"])

        self._items.insert(0, item)
        self._persist()
        self._log_action("add_item", key=self.storage_key, item_id=item.id, product=item.product)
        return Result.ok(item)

    def add_many(self, candidates: Iterable[CandidateItem]) -> Result[List[Item]]:
        """
        Add a batch of extracted items at the top of the list.

        The batch keeps its own order. Candidates without a product name are
        skipped; a candidate with malformed amounts falls back to the defaults.

        Returns:
            Result containing the items that were added
        """
        added: List[Item] = []
        for candidate in candidates:
            if not candidate.product or not candidate.product.strip():
                self.logger.warning("Skipping extracted item without product", candidate=candidate.model_dump())
                continue
            try:
                item = self._build(
                    candidate.product.strip(),
                    candidate.quantity,
                    candidate.price,
                    taken=[a.id for a in added]
                )
            except ValueError as e:
                self.logger.warning(
                    "Extracted amounts rejected, using defaults",
                    product=candidate.product,
                    error=str(e)
                )
                item = self._build(candidate.product.strip(), taken=[a.id for a in added])
            added.append(item)

        if not added:
            return Result.ok([])

        self._items[0:0] = added
        self._persist()
        self._log_action("add_many", key=self.storage_key, count=len(added))
        return Result.ok(added)

    def _apply_update(self, item: Item, fields: dict) -> Item:
        updates = {}
        if "product" in fields:
            name_result = self._validate_name(fields["product"])
            if not name_result.success:
                raise ValueError(name_result.error)
            updates["product"] = name_result.data
        return item.model_copy(update=updates)

    def update(self, item_id: str, **fields) -> Result[Item]:
        """
        Edit an existing item. The id cannot change.

        Args:
            item_id: ID of the item to edit
            **fields: New values (product, and for the shopping list
                quantity, price and price_uncertain)

        Returns:
            Result containing the updated item or error
        """
        if "id" in fields:
            return Result.fail("Item id cannot be changed")
        index = self._index_of(item_id)
        if index is None:
            return Result.fail("Item not found")
        try:
            updated = self._apply_update(self._items[index], fields)
        except ValueError as e:
            return Result.fail(str(e))

        self._items[index] = updated
        self._persist()
        self._log_action("update_item", key=self.storage_key, item_id=item_id, fields=sorted(fields))
        return Result.ok(updated)

    def remove(self, item_id: str) -> Result[Item]:
        """Remove exactly one item; the rest keep their order."""
        index = self._index_of(item_id)
        if index is None:
            return Result.fail("Item not found")
        removed = self._items.pop(index)
        self._persist()
        self._log_action("remove_item", key=self.storage_key, item_id=item_id)
        return Result.ok(removed)

    def toggle_visible(self, item_id: str) -> Result[Item]:
        """Flip whether an item is shown normally and counted."""
        index = self._index_of(item_id)
        if index is None:
            return Result.fail("Item not found")
        item = self._items[index]
        updated = item.model_copy(update={"visible": not item.visible})
        self._items[index] = updated
        self._persist()
        self._log_action("toggle_visible", key=self.storage_key, item_id=item_id, visible=updated.visible)
        return Result.ok(updated)

    def reorder(self, new_order: Sequence[str]) -> Result[List[Item]]:
        """
        Rearrange items.

        Args:
            new_order: Every current item id exactly once, in the new order

        Returns:
            Result containing the reordered items or error
        """
        if len(new_order) != len(self._items) or set(new_order) != {i.id for i in self._items}:
            return Result.fail("New order must contain every item exactly once")
        by_id = {item.id: item for item in self._items}
        self._items = [by_id[item_id] for item_id in new_order]
        self._persist()
        self._log_action("reorder", key=self.storage_key, count=len(self._items))
        return Result.ok(self.items)

    def clear(self) -> Result[int]:
        """Remove every item."""
        if not self._items:
            return Result.fail("There are no items to clear")
        count = len(self._items)
        self._items = []
        self._persist()
        self._log_action("clear", key=self.storage_key, count=count)
        return Result.ok(count)


class ShoppingListStore(ItemStore):
    """Priced shopping list with a running total."""

    storage_key = SHOPPING_LIST_KEY

    def _restore(self, raw: dict) -> Item:
        item = Item.model_validate(raw)
        quantity = self._restore_amount(item, item.quantity, DEFAULT_QUANTITY, "quantity")
        price = self._restore_amount(item, item.price, DEFAULT_PRICE, "price")
        return item.model_copy(update={"quantity": quantity, "price": price})

    def _restore_amount(self, item: Item, value: Optional[str], default: str, field: str) -> str:
        try:
            return normalize_amount(value, default, field)
        except ValueError:
            self.logger.warning(
                "Stored amount is not a number, using default",
                item_id=item.id,
                field=field,
                value=value
            )
            return default

    def _build(self, product: str, quantity=None, price=None, taken: Iterable[str] = ()) -> Item:
        return Item(
            id=self._new_id(taken),
            product=product,
            quantity=normalize_amount(quantity, DEFAULT_QUANTITY, "quantity"),
            price=normalize_amount(price, DEFAULT_PRICE, "price"),
        )

    def _apply_update(self, item: Item, fields: dict) -> Item:
        unknown = set(fields) - {"product", "quantity", "price", "price_uncertain"}
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")
        updated = super()._apply_update(item, fields)
        updates = {}
        if "quantity" in fields:
            updates["quantity"] = normalize_amount(fields["quantity"], DEFAULT_QUANTITY, "quantity")
        if "price" in fields:
            updates["price"] = normalize_amount(fields["price"], DEFAULT_PRICE, "price")
        if "price_uncertain" in fields:
            updates["price_uncertain"] = bool(fields["price_uncertain"])
        return updated.model_copy(update=updates)

    def toggle_price_uncertain(self, item_id: str) -> Result[Item]:
        """Flip the display-only "price not confirmed" flag."""
        index = self._index_of(item_id)
        if index is None:
            return Result.fail("Item not found")
        item = self._items[index]
        updated = item.model_copy(update={"price_uncertain": not item.price_uncertain})
        self._items[index] = updated
        self._persist()
        self._log_action(
            "toggle_price_uncertain",
            key=self.storage_key,
            item_id=item_id,
            price_uncertain=updated.price_uncertain
        )
        return Result.ok(updated)

    def total(self) -> float:
        """Sum of price times quantity over visible items."""
        return calculate_total(self._items)


class WishlistStore(ItemStore):
    """Unpriced list of things to buy some day."""

    storage_key = WISHLIST_KEY

    def _restore(self, raw: dict) -> Item:
        item = Item.model_validate(raw)
        return item.model_copy(update={"quantity": None, "price": None, "price_uncertain": False})

    def _build(self, product: str, quantity=None, price=None, taken: Iterable[str] = ()) -> Item:
        return Item(id=self._new_id(taken), product=product)

    def _apply_update(self, item: Item, fields: dict) -> Item:
        unknown = set(fields) - {"product"}
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")
        return super()._apply_update(item, fields)

    def apply_visibility(self, visibility: Dict[str, bool]) -> Result[List[Item]]:
        """
        Set the visible flag of listed ids that are still in the wishlist.

        Ids no longer present are ignored. Nothing else about the entries
        changes.

        Returns:
            Result containing the entries whose flag changed
        """
        changed: List[Item] = []
        for index, item in enumerate(self._items):
            new_visible = visibility.get(item.id)
            if new_visible is None or new_visible == item.visible:
                continue
            updated = item.model_copy(update={"visible": new_visible})
            self._items[index] = updated
            changed.append(updated)

        if changed:
            self._persist()
            self._log_action("apply_visibility", key=self.storage_key, count=len(changed))
        return Result.ok(changed)
