"""Which screen is showing."""
from typing import Callable, List, Optional

from shoplist.config.settings import get_settings
from shoplist.utils.logger import get_logger

SHOPPING_LIST = "shopping_list"
WISHLIST = "wishlist"
LLM_CHAT = "llm_chat"

SCREEN_TITLES = {
    SHOPPING_LIST: "Shopping List",
    WISHLIST: "Wishlist",
    LLM_CHAT: "LLM Chat",
}


class ScreenController:
    """Switches between the list screens in a fixed order.

    Cycling stops at the first and last screen instead of wrapping around.
    Every switch dismisses the on-screen keyboard.
    """

    def __init__(
        self,
        chat_enabled: Optional[bool] = None,
        dismiss_keyboard: Optional[Callable[[], None]] = None,
        swipe_threshold: Optional[int] = None
    ):
        settings = get_settings()
        if chat_enabled is None:
            chat_enabled = settings.LLM_CHAT_ENABLED
        self.screens: List[str] = [SHOPPING_LIST, WISHLIST]
        if chat_enabled:
            self.screens.append(LLM_CHAT)
        self.active = SHOPPING_LIST
        self.swipe_threshold = swipe_threshold or settings.SWIPE_THRESHOLD
        self._dismiss_keyboard = dismiss_keyboard or (lambda: None)
        self.logger = get_logger(self.__class__.__name__)

    def _switch(self, screen: str) -> str:
        self._dismiss_keyboard()
        if screen != self.active:
            self.logger.debug("Screen changed", previous=self.active, screen=screen)
            self.active = screen
        return self.active

    def select(self, screen: str) -> str:
        """Show a screen by name (header tap)."""
        if screen not in self.screens:
            raise ValueError(f"Unknown screen '{screen}'")
        return self._switch(screen)

    def next(self) -> str:
        index = self.screens.index(self.active)
        return self._switch(self.screens[min(index + 1, len(self.screens) - 1)])

    def previous(self) -> str:
        index = self.screens.index(self.active)
        return self._switch(self.screens[max(index - 1, 0)])

    def on_swipe(self, dx: float, dy: float) -> str:
        """Handle a finished drag gesture.

        Only clearly horizontal drags past the threshold switch screens;
        dragging left moves forward.
        """
        if abs(dx) <= abs(dy):
            return self.active
        if dx > self.swipe_threshold:
            return self.previous()
        if dx < -self.swipe_threshold:
            return self.next()
        return self.active

    def on_background(self) -> None:
        """The app left the foreground."""
        self._dismiss_keyboard()
