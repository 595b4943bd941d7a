"""Wiring of stores, settings and remote-call components."""
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session

from shoplist.ai.chat import ChatSession
from shoplist.ai.client import LLMClient
from shoplist.ai.extraction import ExtractionClient
from shoplist.ai.reconcile import WishlistReconciler
from .add_items import AddItemsFlow
from .app_settings import AppSettingsService
from .credentials import Credentials
from .item_store import ShoppingListStore, WishlistStore
from .screens import ScreenController
from .storage import KeyValueStore


@dataclass
class AppContext:
    """Everything a screen needs, created once at startup."""
    storage: KeyValueStore
    credentials: Credentials
    app_settings: AppSettingsService
    shopping: ShoppingListStore
    wishlist: WishlistStore
    llm: LLMClient
    flow: AddItemsFlow
    screens: ScreenController

    def new_chat(self) -> ChatSession:
        """Start a conversation on the selected model."""
        return ChatSession(self.llm, self.app_settings.selected_model)


def create_app_context(
    session: Session,
    llm: Optional[LLMClient] = None,
    screens: Optional[ScreenController] = None
) -> AppContext:
    """Load persisted state and build the app's services."""
    storage = KeyValueStore(session)

    credentials = Credentials(storage)
    credentials.load()

    app_settings = AppSettingsService(storage)
    app_settings.load()

    shopping = ShoppingListStore(storage)
    shopping.load()
    wishlist = WishlistStore(storage)
    wishlist.load()

    llm = llm or LLMClient(credentials)
    flow = AddItemsFlow(
        shopping=shopping,
        wishlist=wishlist,
        extraction=ExtractionClient(llm),
        reconciler=WishlistReconciler(llm),
        app_settings=app_settings,
    )
    return AppContext(
        storage=storage,
        credentials=credentials,
        app_settings=app_settings,
        shopping=shopping,
        wishlist=wishlist,
        llm=llm,
        flow=flow,
        screens=screens or ScreenController(),
    )
