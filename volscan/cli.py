"""CLI for volscan."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import List, Optional

from .chains import DEFAULT_CHAINS
from .config import load_settings
from .dispatcher import scan_chain, scan_wallet
from .errors import ConfigurationError
from .potential import summarize_wallet


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="volscan")
    parser.add_argument("--verbose", action="store_true", help="Log scan progress to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    volume_parser = subparsers.add_parser("volume", help="Estimate volume for one chain")
    volume_parser.add_argument("--chain", required=True, help="Chain id or name (e.g. 1, base, solana)")
    volume_parser.add_argument("--address", required=True, help="Wallet address")
    volume_parser.add_argument("--trace", action="store_true", help="Include scan trace lines")
    volume_parser.add_argument("--json", action="store_true", help="Print as JSON")

    wallet_parser = subparsers.add_parser("wallet", help="Estimate volume across chains")
    wallet_parser.add_argument("--address", required=True, help="Wallet address")
    wallet_parser.add_argument(
        "--chains",
        default=",".join(DEFAULT_CHAINS),
        help="Comma-separated chain ids or names",
    )
    wallet_parser.add_argument("--json", action="store_true", help="Print as JSON")

    return parser


def _split_chains(value: str) -> List[str]:
    return [chain.strip() for chain in value.split(",") if chain.strip()]


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        settings = load_settings()
        if args.command == "volume":
            result = asyncio.run(scan_chain(args.chain, args.address, settings=settings))
            if args.json:
                print(json.dumps(result.to_dict(include_trace=args.trace)))
            else:
                print(f"volume: ${result.volume:,.2f}")
                print(f"tx_count: {result.tx_count}")
                if result.error:
                    print(f"error: {result.error}")
                if args.trace:
                    for line in result.trace:
                        print(line)
            return 0

        if args.command == "wallet":
            chains = _split_chains(args.chains)
            results = asyncio.run(scan_wallet(args.address, chains, settings=settings))
            summary = summarize_wallet(args.address, results)
            if args.json:
                output = summary.to_dict()
                output["chains"] = {chain: result.to_dict() for chain, result in results.items()}
                print(json.dumps(output))
            else:
                for chain, result in results.items():
                    suffix = f" error={result.error}" if result.error else ""
                    print(f"{chain}: ${result.volume:,.2f} ({result.tx_count} txs){suffix}")
                print(f"total: ${summary.total_volume:,.2f}")
                print(f"airdrop potential: {summary.airdrop_potential.label} ({summary.airdrop_potential.value})")
            return 0
    except ConfigurationError as exc:
        print(str(exc))
        return 2

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
