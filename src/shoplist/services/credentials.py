"""API credential lifecycle."""
from typing import Optional

from shoplist.ai.errors import MissingCredential
from shoplist.config.settings import get_llm_settings
from .base_service import BaseService, Result
from .storage import KeyValueStore, API_KEY_KEY


class Credentials(BaseService):
    """The user's API key, loaded once and passed to remote-call components.

    A key entered by the user is stored in the key-value store and wins over
    the one from the environment.
    """

    def __init__(self, storage: KeyValueStore, env_key: Optional[str] = None):
        super().__init__()
        self.storage = storage
        self._env_key = env_key
        self._api_key: Optional[str] = None

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def load(self) -> Optional[str]:
        """Read the stored key, falling back to the environment."""
        stored = self.storage.get(API_KEY_KEY)
        if stored and stored.strip():
            self._api_key = stored.strip()
            source = "storage"
        else:
            env_key = self._env_key if self._env_key is not None else get_llm_settings().API_KEY
            self._api_key = env_key or None
            source = "environment" if self._api_key else "none"
        self._log_action("load_credentials", source=source)
        return self._api_key

    def set(self, api_key: str) -> Result[bool]:
        """Save a key entered by the user."""
        if not api_key or not api_key.strip():
            return Result.fail("API key cannot be empty", suggestions=["Paste your Gemini API key"])
        result = self.storage.set(API_KEY_KEY, api_key.strip())
        if not result.success:
            return Result.fail(result.error)
        self._api_key = api_key.strip()
        self._log_action("set_credentials")
        return Result.ok(True)

    def clear(self) -> Result[bool]:
        """Forget the stored key; later remote calls prompt for a new one."""
        result = self.storage.remove(API_KEY_KEY)
        if not result.success:
            return Result.fail(result.error)
        self._api_key = None
        self._log_action("clear_credentials")
        return Result.ok(True)

    def require(self) -> str:
        """Return the key for a remote call.

        Raises:
            MissingCredential: If no key is configured
        """
        if not self._api_key:
            raise MissingCredential(
                "No API key configured",
                suggestions=["Set your Gemini API key in settings"]
            )
        return self._api_key
