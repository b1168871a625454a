"""Value types shared by the fetcher, scanner and reconciler."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable


class EndpointKind(str, Enum):
    TRANSFERS = "transfers"
    TRANSACTIONS = "transactions"


class StopReason(str, Enum):
    DEADLINE = "deadline"
    PAGE_CAP = "page cap"
    UNSUPPORTED = "unsupported"
    FETCH_FAILURE = "fetch failure"
    EXHAUSTED = "exhausted"
    NO_MORE_PAGES = "no more pages"


@dataclass(frozen=True)
class Page:
    endpoint: str
    index: int
    items: List[Dict[str, Any]]
    has_more: bool


@runtime_checkable
class PageFetcher(Protocol):
    """Anything that can fetch one page of one endpoint."""

    async def fetch(
        self, chain: str, address: str, endpoint: str, page_number: int, page_size: int = ...
    ) -> Page: ...


@dataclass(frozen=True)
class ScanResult:
    volume: Decimal = Decimal(0)
    tx_count: int = 0
    trace: Tuple[str, ...] = ()
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str, trace: Tuple[str, ...] = ()) -> "ScanResult":
        return cls(volume=Decimal(0), tx_count=0, trace=tuple(trace), error=error)

    def to_dict(self, include_trace: bool = False) -> dict:
        output: dict = {"volume": float(self.volume), "txCount": self.tx_count}
        if include_trace:
            output["trace"] = list(self.trace)
        if self.error:
            output["error"] = self.error
        return output


@dataclass(frozen=True)
class Deadline:
    """Wall-clock budget shared by every scan of one request."""

    budget: float
    started: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def start(cls, budget: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(budget=float(budget), started=clock(), clock=clock)

    def elapsed(self) -> float:
        return self.clock() - self.started

    def remaining(self) -> float:
        return max(0.0, self.budget - self.elapsed())

    def expired(self) -> bool:
        return self.elapsed() >= self.budget
