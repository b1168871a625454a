"""Combine the transfers and transactions scans of one chain/address."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from .config import DEFAULT_DEADLINE_SECONDS, DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE
from .errors import VolscanError
from .models import Deadline, EndpointKind, PageFetcher, ScanResult
from .scanner import scan


_LOGGER = logging.getLogger("volscan.reconciler")


def merge_results(transfers: ScanResult, transactions: ScanResult) -> ScanResult:
    """Take the larger of the two totals, never their sum.

    The two endpoints overlap (token movements vs native value) in ways that
    depend on chain and wallet, so this is an approximation: a wallet whose
    value is split across both endpoints is undercounted.
    """

    return ScanResult(
        volume=max(transfers.volume, transactions.volume),
        tx_count=max(transfers.tx_count, transactions.tx_count),
        trace=transfers.trace + transactions.trace,
        error=transfers.error or transactions.error,
    )


async def reconcile(
    fetcher: PageFetcher,
    chain: str,
    address: str,
    deadline: float = DEFAULT_DEADLINE_SECONDS,
    max_pages: int = DEFAULT_MAX_PAGES,
    page_size: int = DEFAULT_PAGE_SIZE,
    clock: Callable[[], float] = time.monotonic,
) -> ScanResult:
    """Scan both endpoint kinds under one shared deadline and merge them.

    Never raises. An unclassified failure in either branch turns the whole
    result into a zero volume carrying ``error``.
    """

    shared = Deadline.start(deadline, clock=clock)
    _LOGGER.info("reconcile start chain=%s address=%s budget=%s", chain, address, deadline)

    # on Solana the transfers branch resolves without issuing a request
    outcomes = await asyncio.gather(
        scan(fetcher, chain, address, EndpointKind.TRANSFERS, shared, max_pages, page_size),
        scan(fetcher, chain, address, EndpointKind.TRANSACTIONS, shared, max_pages, page_size),
        return_exceptions=True,
    )

    failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
    for failure in failures:
        if not isinstance(failure, Exception):
            raise failure
    if failures:
        trace = tuple(
            line for outcome in outcomes if isinstance(outcome, ScanResult) for line in outcome.trace
        )
        message = str(failures[0]) or type(failures[0]).__name__
        if not isinstance(failures[0], VolscanError):
            _LOGGER.error(
                "reconcile failed chain=%s address=%s error=%s",
                chain,
                address,
                message,
                exc_info=failures[0],
            )
        else:
            _LOGGER.warning("reconcile failed chain=%s address=%s error=%s", chain, address, message)
        return ScanResult.failed(message, trace=trace)

    transfers, transactions = outcomes
    result = merge_results(transfers, transactions)
    _LOGGER.info(
        "reconcile complete chain=%s address=%s volume=%s tx_count=%s elapsed=%.2f",
        chain,
        address,
        result.volume,
        result.tx_count,
        shared.elapsed(),
    )
    return result
