from dataclasses import dataclass
from typing import Optional

from .errors import StorefrontError


@dataclass(frozen=True)
class OperationResult:
    ok: bool
    message: str = ""
    error: Optional[StorefrontError] = None

    @classmethod
    def success(cls, message: str = "") -> "OperationResult":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, error: StorefrontError, message: Optional[str] = None) -> "OperationResult":
        return cls(ok=False, message=message if message is not None else error.message, error=error)
