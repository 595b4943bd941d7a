"""Result type and base class for shoplist services."""
from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field

from shoplist.utils.logger import get_logger

T = TypeVar('T')


class Result(BaseModel, Generic[T]):
    """Outcome of a store or settings operation.

    Failures carry a user-facing message and hints instead of raising.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: str = ""
    suggestions: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls, data: T, **metadata) -> 'Result[T]':
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        suggestions: Optional[List[str]] = None,
        **metadata
    ) -> 'Result[T]':
        """Failed result; an empty message becomes "Unknown error"."""
        return cls(
            success=False,
            error=error or "Unknown error",
            suggestions=suggestions or [],
            metadata=metadata
        )


class BaseService:
    """Gives each service a logger named after its class."""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def _log_action(self, action: str, status: str = "success", **details) -> None:
        """Log one service operation with structured details."""
        self.logger.info(f"{action} [{status}]", action=action, status=status, **details)

    def _validate_name(self, name: Optional[str]) -> Result[str]:
        """Stripped product name, or a failure for blank input."""
        if not name or not name.strip():
            return Result.fail(
                "Product name cannot be empty",
                suggestions=["Type a product name"]
            )
        return Result.ok(name.strip())
