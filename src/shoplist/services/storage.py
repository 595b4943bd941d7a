"""Key-value persistence for list blobs and settings."""
import json
from typing import Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shoplist.db.session import TransactionManager
from shoplist.models import KeyValueEntry
from .base_service import BaseService, Result


# Fixed storage keys
SHOPPING_LIST_KEY = "SHOPPING_LIST_ITEMS"
WISHLIST_KEY = "WISHLIST_ITEMS"
SELECTED_MODEL_KEY = "SELECTED_MODEL"
AUTO_HIDE_KEY = "AUTO_HIDE_WISHLIST_ON_ADD"
API_KEY_KEY = "GEMINI_API_KEY"


class KeyValueStore(BaseService):
    """String values stored whole under fixed keys."""

    def __init__(self, session: Session):
        super().__init__()
        self.session = session
        self.transaction = TransactionManager(session)

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent or unreadable."""
        try:
            entry = self.session.get(KeyValueEntry, key)
        except SQLAlchemyError:
            self.logger.exception("Failed to read key", key=key)
            return None
        return entry.value if entry else None

    def set(self, key: str, value: str) -> Result[str]:
        """Create or overwrite the value under a key."""
        try:
            with self.transaction.transaction() as session:
                entry = session.get(KeyValueEntry, key)
                if entry:
                    entry.value = value
                else:
                    session.add(KeyValueEntry(key=key, value=value))
            self.logger.debug("Stored key", key=key, size=len(value))
            return Result.ok(key)
        except SQLAlchemyError:
            self.logger.exception("Failed to store key", key=key)
            return Result.fail("Failed to save data")

    def remove(self, key: str) -> Result[bool]:
        """Delete a key; removing a missing key is not an error."""
        try:
            with self.transaction.transaction() as session:
                entry = session.get(KeyValueEntry, key)
                if not entry:
                    return Result.ok(False)
                session.delete(entry)
            self._log_action("remove_key", key=key)
            return Result.ok(True)
        except SQLAlchemyError:
            self.logger.exception("Failed to remove key", key=key)
            return Result.fail("Failed to remove data")

    def get_json(self, key: str) -> Optional[Any]:
        """Return the decoded JSON value under a key.

        Raises:
            ValueError: If the stored value is not valid JSON
        """
        raw = self.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value: Any) -> Result[str]:
        """Encode a value as JSON and store it."""
        return self.set(key, json.dumps(value, ensure_ascii=False))
