"""Chain identifiers and per-chain endpoint selection."""

from __future__ import annotations

from typing import Dict, Tuple

from .models import EndpointKind


SOLANA_CHAIN_ID = "1399811149"

TRANSFERS_V2 = "transfers_v2"
TRANSACTIONS_V2 = "transactions_v2"
TRANSACTIONS_V3 = "transactions_v3"

CHAIN_IDS: Dict[str, str] = {
    "ethereum": "1",
    "base": "8453",
    "arbitrum": "42161",
    "optimism": "10",
    "bsc": "56",
    "polygon": "137",
    "avalanche": "43114",
    "solana": SOLANA_CHAIN_ID,
    "zora": "7777777",
    "scroll": "534352",
    "blast": "81457",
    "fantom": "250",
}

DEFAULT_CHAINS: Tuple[str, ...] = tuple(CHAIN_IDS)

_EVM_VARIANTS = {
    EndpointKind.TRANSFERS: (TRANSFERS_V2,),
    EndpointKind.TRANSACTIONS: (TRANSACTIONS_V3, TRANSACTIONS_V2),
}

# Solana has no transfers endpoint and answers 501 on transactions_v3.
_SOLANA_VARIANTS = {
    EndpointKind.TRANSFERS: (),
    EndpointKind.TRANSACTIONS: (TRANSACTIONS_V2,),
}


def is_solana(chain: str) -> bool:
    return str(chain).strip() == SOLANA_CHAIN_ID


def resolve_chain_id(chain: str) -> str:
    """Return the numeric chain id for a chain name or id."""

    value = str(chain or "").strip()
    if not value:
        raise ValueError("Missing chain")
    if value.isdigit():
        return value
    chain_id = CHAIN_IDS.get(value.lower())
    if chain_id is None:
        raise ValueError(f"Unknown chain: {value}")
    return chain_id


def endpoint_variants(chain: str, kind: EndpointKind) -> Tuple[str, ...]:
    """Ordered endpoint names to attempt for ``kind`` on ``chain``."""

    table = _SOLANA_VARIANTS if is_solana(chain) else _EVM_VARIANTS
    return table[kind]
