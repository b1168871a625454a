"""Per-chain fan-out of wallet volume scans."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from .config import Settings, load_settings
from .chains import resolve_chain_id
from .fetcher import CovalentFetcher
from .models import PageFetcher, ScanResult
from .reconciler import reconcile


_LOGGER = logging.getLogger("volscan.dispatcher")


async def _reconcile_chain(fetcher: PageFetcher, chain: str, address: str, settings: Settings) -> ScanResult:
    try:
        chain_id = resolve_chain_id(chain)
    except ValueError as exc:
        _LOGGER.warning("dispatch unknown chain=%s address=%s", chain, address)
        return ScanResult.failed(str(exc))
    return await reconcile(
        fetcher,
        chain_id,
        address,
        deadline=settings.deadline_seconds,
        max_pages=settings.max_pages,
        page_size=settings.page_size,
    )


async def scan_chain(
    chain: str,
    address: str,
    settings: Optional[Settings] = None,
    fetcher: Optional[PageFetcher] = None,
) -> ScanResult:
    """Volume for a single (chain, address) pair.

    Raises :class:`ConfigurationError` when no API key is configured; any
    other failure is reported through ``ScanResult.error``.
    """

    settings = settings or load_settings()
    settings.require_api_key()
    if fetcher is None:
        async with CovalentFetcher.from_settings(settings) as owned:
            return await _reconcile_chain(owned, chain, address, settings)
    return await _reconcile_chain(fetcher, chain, address, settings)


async def scan_wallet(
    address: str,
    chain_ids: Iterable[str],
    settings: Optional[Settings] = None,
    fetcher: Optional[PageFetcher] = None,
) -> Dict[str, ScanResult]:
    """Scan every requested chain concurrently.

    The result holds exactly one entry per requested chain, keyed as
    requested. A chain that fails contributes a zero result with ``error``.
    """

    settings = settings or load_settings()
    settings.require_api_key()
    chains: List[str] = list(dict.fromkeys(str(chain).strip() for chain in chain_ids))
    _LOGGER.info("scan wallet start address=%s chains=%s", address, ",".join(chains))
    if fetcher is None:
        async with CovalentFetcher.from_settings(settings) as owned:
            return await _fan_out(owned, address, chains, settings)
    return await _fan_out(fetcher, address, chains, settings)


async def _fan_out(
    fetcher: PageFetcher, address: str, chains: List[str], settings: Settings
) -> Dict[str, ScanResult]:
    outcomes = await asyncio.gather(
        *(_reconcile_chain(fetcher, chain, address, settings) for chain in chains),
        return_exceptions=True,
    )
    results: Dict[str, ScanResult] = {}
    for chain, outcome in zip(chains, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            _LOGGER.error("scan wallet chain failed chain=%s address=%s", chain, address, exc_info=outcome)
            outcome = ScanResult.failed(str(outcome) or type(outcome).__name__)
        results[chain] = outcome
    _LOGGER.info(
        "scan wallet complete address=%s chains=%s failed=%s",
        address,
        len(results),
        sum(1 for result in results.values() if result.error),
    )
    return results
