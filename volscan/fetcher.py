"""Covalent page fetches."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_FETCH_TIMEOUT, DEFAULT_PAGE_SIZE, Settings
from .errors import FetchError, FetchErrorKind, MalformedResponseError
from .models import Page


_LOGGER = logging.getLogger("volscan.fetcher")


class CovalentFetcher:
    """Fetches one page of an address endpoint per call.

    Upstream failures are raised as :class:`FetchError` with a closed set of
    kinds. Nothing is retried here.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> "CovalentFetcher":
        return cls(
            api_key=settings.require_api_key(),
            base_url=settings.base_url,
            timeout=settings.fetch_timeout,
            client=client,
        )

    async def __aenter__(self) -> "CovalentFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def url_for(self, chain: str, address: str, endpoint: str) -> str:
        return f"{self._base_url}/{chain}/address/{address}/{endpoint}/"

    async def fetch(
        self,
        chain: str,
        address: str,
        endpoint: str,
        page_number: int,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        url = self.url_for(chain, address, endpoint)
        params = {
            "key": self._api_key,
            "page-number": page_number,
            "page-size": page_size,
            "quote-currency": "USD",
        }
        _LOGGER.debug("fetch start chain=%s endpoint=%s page=%s", chain, endpoint, page_number)
        try:
            response = await self._client.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            _LOGGER.warning("fetch timeout chain=%s endpoint=%s page=%s", chain, endpoint, page_number)
            raise FetchError(FetchErrorKind.TIMEOUT, f"Timed out fetching {endpoint} page {page_number}") from exc
        except httpx.HTTPError as exc:
            _LOGGER.warning(
                "fetch transport error chain=%s endpoint=%s page=%s error=%s",
                chain,
                endpoint,
                page_number,
                type(exc).__name__,
            )
            raise FetchError(FetchErrorKind.TRANSPORT, f"Transport error fetching {endpoint}: {exc}") from exc

        if response.status_code >= 400:
            _LOGGER.warning(
                "fetch rejected chain=%s endpoint=%s page=%s status=%s body=%s",
                chain,
                endpoint,
                page_number,
                response.status_code,
                response.text[:300],
            )
            raise FetchError.from_status(
                response.status_code,
                f"{endpoint} answered HTTP {response.status_code} for chain {chain}",
            )

        return _parse_page(endpoint, page_number, response)


def _parse_page(endpoint: str, page_number: int, response: httpx.Response) -> Page:
    try:
        body: Any = response.json()
    except ValueError as exc:
        raise MalformedResponseError(f"Invalid JSON from {endpoint} page {page_number}") from exc
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Missing data object in {endpoint} page {page_number}")
    items = data.get("items") or []
    if not isinstance(items, list):
        raise MalformedResponseError(f"Items is not a list in {endpoint} page {page_number}")
    pagination = data.get("pagination") or {}
    has_more = isinstance(pagination, dict) and pagination.get("has_more") is True
    return Page(endpoint=endpoint, index=page_number, items=items, has_more=has_more)
