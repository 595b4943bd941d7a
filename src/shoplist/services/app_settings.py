"""User preferences persisted in the key-value store."""
from shoplist.config.settings import AVAILABLE_MODELS, get_settings
from .base_service import BaseService, Result
from .storage import KeyValueStore, AUTO_HIDE_KEY, SELECTED_MODEL_KEY


class AppSettingsService(BaseService):
    """Selected model and the auto-hide-on-add switch, each stored on its own."""

    def __init__(self, storage: KeyValueStore):
        super().__init__()
        self.storage = storage
        settings = get_settings()
        self.selected_model: str = settings.DEFAULT_MODEL
        self.auto_hide_wishlist_on_add: bool = settings.DEFAULT_AUTO_HIDE_WISHLIST_ON_ADD

    def load(self) -> None:
        """Read stored preferences; unknown or missing values keep the defaults."""
        stored_model = self.storage.get(SELECTED_MODEL_KEY)
        if stored_model in AVAILABLE_MODELS:
            self.selected_model = stored_model
        elif stored_model:
            self.logger.warning("Ignoring unknown stored model", model=stored_model)

        stored_hide = self.storage.get(AUTO_HIDE_KEY)
        if stored_hide is not None:
            self.auto_hide_wishlist_on_add = stored_hide == "true"
        self._log_action(
            "load_settings",
            model=self.selected_model,
            auto_hide=self.auto_hide_wishlist_on_add
        )

    def select_model(self, model: str) -> Result[str]:
        """Choose the remote model used for every call."""
        if model not in AVAILABLE_MODELS:
            return Result.fail(
                f"Unknown model '{model}'",
                suggestions=list(AVAILABLE_MODELS)
            )
        self.selected_model = model
        result = self.storage.set(SELECTED_MODEL_KEY, model)
        if not result.success:
            return Result.fail(result.error)
        self._log_action("select_model", model=model)
        return Result.ok(model)

    def toggle_auto_hide(self) -> Result[bool]:
        """Flip whether shopping adds hide matching wishlist entries."""
        self.auto_hide_wishlist_on_add = not self.auto_hide_wishlist_on_add
        result = self.storage.set(AUTO_HIDE_KEY, "true" if self.auto_hide_wishlist_on_add else "false")
        if not result.success:
            return Result.fail(result.error)
        self._log_action("toggle_auto_hide", auto_hide=self.auto_hide_wishlist_on_add)
        return Result.ok(self.auto_hide_wishlist_on_add)
