"""Paginated volume scan of one endpoint kind for one chain/address."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncIterator, NamedTuple, Tuple, Union

from .accumulator import page_volume
from .chains import endpoint_variants, is_solana
from .config import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE
from .errors import FetchError
from .models import Deadline, EndpointKind, Page, PageFetcher, ScanResult, StopReason


_LOGGER = logging.getLogger("volscan.scanner")


@dataclass(frozen=True)
class Stop:
    reason: StopReason
    detail: str = ""


class _Tally(NamedTuple):
    volume: Decimal = Decimal(0)
    tx_count: int = 0
    pages: int = 0
    trace: Tuple[str, ...] = ()

    def with_page(self, page: Page, volume: Decimal) -> "_Tally":
        line = f"[{page.endpoint}] page {page.index}: ${volume:.2f} ({len(page.items)} items)"
        return _Tally(
            volume=self.volume + volume,
            tx_count=self.tx_count + len(page.items),
            pages=self.pages + 1,
            trace=self.trace + (line,),
        )

    def note(self, line: str) -> "_Tally":
        return self._replace(trace=self.trace + (line,))


async def iter_pages(
    fetcher: PageFetcher,
    chain: str,
    address: str,
    endpoint: str,
    deadline: Deadline,
    max_pages: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> AsyncIterator[Union[Page, Stop]]:
    """Yield non-empty pages in index order, then exactly one :class:`Stop`.

    Before each fetch the deadline is checked first, then the page cap.
    Fetch errors end the sequence instead of propagating.
    """

    page_number = 0
    while True:
        if deadline.expired():
            yield Stop(StopReason.DEADLINE, f"{deadline.elapsed():.2f}s elapsed")
            return
        if page_number >= max_pages:
            yield Stop(StopReason.PAGE_CAP, f"{max_pages} pages")
            return
        try:
            page = await fetcher.fetch(chain, address, endpoint, page_number, page_size)
        except FetchError as exc:
            reason = StopReason.UNSUPPORTED if exc.kind.unsupported else StopReason.FETCH_FAILURE
            yield Stop(reason, str(exc))
            return
        if not page.items:
            yield Stop(StopReason.EXHAUSTED, f"page {page_number} empty")
            return
        yield page
        if not page.has_more:
            yield Stop(StopReason.NO_MORE_PAGES)
            return
        page_number += 1


async def _scan_endpoint(
    fetcher: PageFetcher,
    chain: str,
    address: str,
    endpoint: str,
    kind: EndpointKind,
    deadline: Deadline,
    max_pages: int,
    page_size: int,
    tally: _Tally,
) -> Tuple[_Tally, Stop]:
    solana = is_solana(chain)
    stop = Stop(StopReason.EXHAUSTED)
    async for outcome in iter_pages(fetcher, chain, address, endpoint, deadline, max_pages, page_size):
        if isinstance(outcome, Stop):
            stop = outcome
            continue
        tally = tally.with_page(outcome, page_volume(outcome.items, kind, solana))
    line = f"[{endpoint}] stopped: {stop.reason.value}"
    if stop.detail:
        line = f"{line} ({stop.detail})"
    _LOGGER.info(
        "scan endpoint done chain=%s endpoint=%s reason=%s volume=%s tx_count=%s",
        chain,
        endpoint,
        stop.reason.value,
        tally.volume,
        tally.tx_count,
    )
    return tally.note(line), stop


async def scan(
    fetcher: PageFetcher,
    chain: str,
    address: str,
    kind: EndpointKind,
    deadline: Deadline,
    max_pages: int = DEFAULT_MAX_PAGES,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ScanResult:
    """Scan ``kind`` for one chain/address and return its totals.

    Endpoint variants are attempted in order; the next variant is used only
    when the current one was rejected as unsupported before yielding a page.
    Kinds with no variant on ``chain`` return a zero result without a fetch.
    """

    variants = endpoint_variants(chain, kind)
    if not variants:
        _LOGGER.info("scan skipped chain=%s kind=%s", chain, kind.value)
        return ScanResult(trace=(f"[{kind.value}] not available on chain {chain}, skipped",))

    tally = _Tally()
    for position, endpoint in enumerate(variants):
        pages_before = tally.pages
        tally, stop = await _scan_endpoint(
            fetcher, chain, address, endpoint, kind, deadline, max_pages, page_size, tally
        )
        last = position == len(variants) - 1
        if last or stop.reason is not StopReason.UNSUPPORTED or tally.pages != pages_before:
            break
        tally = tally.note(f"[{endpoint}] falling back to {variants[position + 1]}")

    return ScanResult(volume=tally.volume, tx_count=tally.tx_count, trace=tally.trace)
