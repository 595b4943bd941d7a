"""Adding items by voice, text or form, with wishlist follow-up."""
import asyncio
from typing import List, Optional, Set

from shoplist.ai.errors import ExtractionParseError, NetworkError, result_from_error
from shoplist.ai.extraction import ExtractionClient
from shoplist.ai.reconcile import WishlistReconciler
from shoplist.domain.types import AudioBlob, CandidateItem, Item
from .app_settings import AppSettingsService
from .base_service import BaseService, Result
from .item_store import ItemStore, ShoppingListStore, WishlistStore

SHOPPING = "shopping"
WISHLIST = "wishlist"


class AddItemsFlow(BaseService):
    """Routes new items into a store.

    After items land on the shopping list, and when auto-hide is on, matching
    wishlist entries are hidden by a background reconciliation that never
    blocks or fails the add.
    """

    def __init__(
        self,
        shopping: ShoppingListStore,
        wishlist: WishlistStore,
        extraction: ExtractionClient,
        reconciler: WishlistReconciler,
        app_settings: AppSettingsService
    ):
        super().__init__()
        self.shopping = shopping
        self.wishlist = wishlist
        self.extraction = extraction
        self.reconciler = reconciler
        self.app_settings = app_settings
        self._background: Set[asyncio.Task] = set()

    def _store(self, target: str) -> ItemStore:
        if target == SHOPPING:
            return self.shopping
        if target == WISHLIST:
            return self.wishlist
        raise ValueError(f"Unknown list '{target}'")

    async def add_from_voice(self, audio: AudioBlob, target: str = SHOPPING) -> Result[List[Item]]:
        """
        Extract items from a recording and add them.

        Raises:
            MissingCredential: If no key is configured
        """
        store = self._store(target)
        try:
            candidates = await self.extraction.extract_items(
                audio,
                self.app_settings.selected_model,
                wishlist=target == WISHLIST
            )
        except (ExtractionParseError, NetworkError) as e:
            self._log_action("add_from_voice", status="failed", target=target, error=e.message)
            return result_from_error(e)
        return self._add_candidates(store, target, candidates)

    async def add_from_text(self, text: str, target: str = SHOPPING) -> Result[List[Item]]:
        """
        Extract items from typed text and add them.

        Raises:
            MissingCredential: If no key is configured
        """
        store = self._store(target)
        try:
            candidates = await self.extraction.extract_items_from_text(
                text,
                self.app_settings.selected_model,
                wishlist=target == WISHLIST
            )
        except (ExtractionParseError, NetworkError) as e:
            self._log_action("add_from_text", status="failed", target=target, error=e.message)
            return result_from_error(e)
        return self._add_candidates(store, target, candidates)

    async def add_manual(
        self,
        product: str,
        quantity: Optional[str] = None,
        price: Optional[str] = None,
        target: str = SHOPPING
    ) -> Result[Item]:
        """Add one item from the form."""
        result = self._store(target).add(product, quantity, price)
        if result.success and target == SHOPPING:
            self._schedule_reconciliation([result.data])
        return result

    def _add_candidates(
        self,
        store: ItemStore,
        target: str,
        candidates: List[CandidateItem]
    ) -> Result[List[Item]]:
        result = store.add_many(candidates)
        if result.success and result.data and target == SHOPPING:
            self._schedule_reconciliation(result.data)
        return result

    def _schedule_reconciliation(self, added: List[Item]) -> Optional[asyncio.Task]:
        if not self.app_settings.auto_hide_wishlist_on_add or not len(self.wishlist):
            return None
        task = asyncio.get_running_loop().create_task(
            self._reconcile(added, self.app_settings.selected_model)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _reconcile(self, added: List[Item], model_id: str) -> None:
        snapshot = self.wishlist.items
        updated = await self.reconciler.reconcile(snapshot, added, model_id)
        # Only push flags that changed, so edits made meanwhile survive
        changes = {
            new.id: new.visible
            for old, new in zip(snapshot, updated)
            if old.visible != new.visible
        }
        if changes:
            self.wishlist.apply_visibility(changes)

    async def drain(self) -> None:
        """Wait for background reconciliations to finish.

        A failed reconciliation is logged; the add it followed already succeeded.
        """
        if not self._background:
            return
        results = await asyncio.gather(*list(self._background), return_exceptions=True)
        for outcome in results:
            if isinstance(outcome, Exception):
                self.logger.opt(exception=outcome).error("Background wishlist reconciliation failed")
