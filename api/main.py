from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from pydantic import BaseModel, Field

from volscan.chains import DEFAULT_CHAINS
from volscan.config import Settings, load_settings
from volscan.dispatcher import scan_chain, scan_wallet
from volscan.errors import ConfigurationError
from volscan.potential import summarize_wallet


_LOGGER = logging.getLogger("volscan.api")
_LOGGER.setLevel(logging.INFO)


class ScanRequest(BaseModel):
    address: str = Field(
        description="Wallet address to scan.",
    )
    chains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CHAINS),
        description="Chain ids or names to scan (defaults to every known chain).",
    )
    include_trace: bool = Field(
        default=False,
        description="Include per-page trace lines for each chain.",
    )


def get_settings() -> Settings:
    return load_settings()


def get_fetcher():
    """Upstream fetcher override; ``None`` lets each request open its own client."""
    return None


app = FastAPI(
    title="Volscan API",
    version="0.1",
    root_path=os.getenv("VOLSCAN_ROOT_PATH", ""),
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_http_request(request, call_next):
    _LOGGER.info(
        "http request method=%s path=%s client=%s",
        request.method,
        request.url.path,
        request.client.host if request.client else "unknown",
    )
    response = await call_next(request)
    _LOGGER.info("http response status=%s path=%s", response.status_code, request.url.path)
    return response


@app.exception_handler(ConfigurationError)
async def configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    _LOGGER.error("configuration error path=%s error=%s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.on_event("startup")
def _log_startup() -> None:
    settings = load_settings()
    _LOGGER.info(
        "startup base_url=%s deadline=%s max_pages=%s page_size=%s api_key_set=%s",
        settings.base_url,
        settings.deadline_seconds,
        settings.max_pages,
        settings.page_size,
        bool(settings.api_key),
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/ping")
def ping() -> dict:
    return {"status": "ok"}


async def _volume(chain: str, address: str, trace: bool, settings: Settings, fetcher) -> dict:
    _LOGGER.info("volume start chain=%s address=%s", chain, address)
    try:
        result = await scan_chain(chain, address, settings=settings, fetcher=fetcher)
    except ConfigurationError:
        raise
    except Exception as exc:
        _LOGGER.exception("volume failed chain=%s address=%s", chain, address)
        return {"volume": 0, "error": str(exc)}
    _LOGGER.info(
        "volume complete chain=%s address=%s volume=%.2f tx_count=%s",
        chain,
        address,
        result.volume,
        result.tx_count,
    )
    return result.to_dict(include_trace=trace)


@app.get("/api/volume/{chain}/{address}")
async def volume_by_path(
    chain: str,
    address: str,
    trace: bool = False,
    settings: Settings = Depends(get_settings),
    fetcher=Depends(get_fetcher),
) -> dict:
    return await _volume(chain, address, trace, settings, fetcher)


@app.get("/volume")
async def volume_by_query(
    chain: Optional[str] = None,
    address: Optional[str] = None,
    trace: bool = False,
    settings: Settings = Depends(get_settings),
    fetcher=Depends(get_fetcher),
) -> dict:
    if not chain or not address:
        raise HTTPException(status_code=400, detail="Missing chain or address")
    return await _volume(chain, address, trace, settings, fetcher)


@app.post("/scan")
async def scan(
    req: ScanRequest,
    settings: Settings = Depends(get_settings),
    fetcher=Depends(get_fetcher),
) -> dict:
    chains = [chain.strip() for chain in req.chains if chain.strip()]
    if not chains:
        raise HTTPException(status_code=400, detail="Select at least one chain.")
    _LOGGER.info("scan start address=%s chains=%s", req.address, len(chains))
    results = await scan_wallet(req.address, chains, settings=settings, fetcher=fetcher)
    summary = summarize_wallet(req.address, results)
    output = summary.to_dict()
    output["chains"] = {
        chain: result.to_dict(include_trace=req.include_trace) for chain, result in results.items()
    }
    _LOGGER.info(
        "scan complete address=%s total=%.2f potential=%s",
        req.address,
        summary.total_volume,
        summary.airdrop_potential.label,
    )
    return output


_MANGUM_HANDLER = Mangum(app)


def handler(event, context):
    request_context = event.get("requestContext", {}) if isinstance(event, dict) else {}
    http_ctx = request_context.get("http", {}) if isinstance(request_context, dict) else {}
    _LOGGER.info(
        "lambda event method=%s path=%s stage=%s source=%s",
        http_ctx.get("method"),
        event.get("rawPath") if isinstance(event, dict) else None,
        request_context.get("stage"),
        http_ctx.get("sourceIp"),
    )
    return _MANGUM_HANDLER(event, context)
