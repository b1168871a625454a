"""Error types raised by volscan."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class VolscanError(Exception):
    """Base class for volscan errors."""


class ConfigurationError(VolscanError):
    """Missing or invalid configuration; fails the whole request."""


class MalformedResponseError(VolscanError, ValueError):
    """Upstream answered 2xx with a body we cannot interpret."""


class FetchErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    GONE = "gone"
    NOT_IMPLEMENTED = "not_implemented"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"

    @property
    def unsupported(self) -> bool:
        return self in _UNSUPPORTED_KINDS


_UNSUPPORTED_KINDS = frozenset(
    {FetchErrorKind.BAD_REQUEST, FetchErrorKind.GONE, FetchErrorKind.NOT_IMPLEMENTED}
)

_STATUS_KINDS = {
    400: FetchErrorKind.BAD_REQUEST,
    410: FetchErrorKind.GONE,
    501: FetchErrorKind.NOT_IMPLEMENTED,
}


class FetchError(VolscanError):
    """A page fetch that did not produce a page."""

    def __init__(self, kind: FetchErrorKind, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status

    @classmethod
    def from_status(cls, status: int, message: str = "") -> "FetchError":
        kind = _STATUS_KINDS.get(status, FetchErrorKind.TRANSPORT)
        return cls(kind, message or f"HTTP {status}", status=status)
