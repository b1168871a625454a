"""Wallet-level totals across chains."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Mapping

from .models import ScanResult


@dataclass(frozen=True)
class AirdropPotential:
    label: str
    value: str


# (exclusive lower bound in USD, tier), highest first
_TIERS = (
    (Decimal(250_000), AirdropPotential("High", "$2,500+")),
    (Decimal(100_000), AirdropPotential("Medium-High", "$1,200")),
    (Decimal(10_000), AirdropPotential("Medium", "$450")),
    (Decimal(1_000), AirdropPotential("Low", "$50")),
)
_NONE = AirdropPotential("None", "$0")


def airdrop_potential(volume: Decimal) -> AirdropPotential:
    for floor, tier in _TIERS:
        if volume > floor:
            return tier
    return _NONE


@dataclass(frozen=True)
class WalletSummary:
    address: str
    chain_volumes: Dict[str, Decimal]
    total_volume: Decimal
    airdrop_potential: AirdropPotential

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "chainVolumes": {chain: float(volume) for chain, volume in self.chain_volumes.items()},
            "totalVolume": float(self.total_volume),
            "airdropPotential": {
                "label": self.airdrop_potential.label,
                "value": self.airdrop_potential.value,
            },
        }


def summarize_wallet(address: str, results: Mapping[str, ScanResult]) -> WalletSummary:
    """Sum per-chain volumes; distinct chains never share value."""

    chain_volumes = {chain: result.volume for chain, result in results.items()}
    total = sum(chain_volumes.values(), Decimal(0))
    return WalletSummary(
        address=address,
        chain_volumes=chain_volumes,
        total_volume=total,
        airdrop_potential=airdrop_potential(total),
    )
