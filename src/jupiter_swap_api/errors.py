"""Error types carrying HTTP context for swap API failures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class SwapApiError(Exception):
    """Base error for every failed swap API exchange."""

    message: str
    http_status: Optional[int] = None
    body: Optional[str] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        suffix = []
        if self.http_status is not None:
            suffix.append(f"status={self.http_status}")
        if self.body:
            suffix.append(f"body={self.body}")
        if self.cause:
            suffix.append(f"cause={self.cause}")
        detail = ", ".join(suffix)
        return f"{self.message} ({detail})" if detail else self.message


@dataclass
class TransportError(SwapApiError):
    """The HTTP exchange itself could not complete."""


@dataclass
class ApiError(SwapApiError):
    """The service answered with a non-success status."""


@dataclass
class DecodeError(SwapApiError):
    """A success response whose body does not fit the expected shape."""
