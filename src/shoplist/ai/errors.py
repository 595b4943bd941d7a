"""Error types for voice capture and remote model calls."""
from typing import Optional, List, Dict, Any

from shoplist.services.base_service import Result


class ShopListError(Exception):
    """Base class for errors surfaced to the user."""
    def __init__(
        self,
        message: str,
        suggestions: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.metadata = metadata or {}
        super().__init__(message)


class PermissionDenied(ShopListError):
    """Microphone access was not granted."""
    pass


class RecordingError(ShopListError):
    """The capture device could not be opened or the recording is unusable."""
    pass


class MissingCredential(ShopListError):
    """No API key is configured for the remote model."""
    pass


class ExtractionParseError(ShopListError):
    """The model response is not a JSON array."""
    pass


class NetworkError(ShopListError):
    """Any transport or API failure talking to the remote model."""
    pass


def result_from_error(error: ShopListError) -> Result:
    """Turn a surfaced error into a failed service result."""
    return Result.fail(
        error.message,
        suggestions=error.suggestions,
        error_type=error.__class__.__name__,
        **error.metadata
    )
