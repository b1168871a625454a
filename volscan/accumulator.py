"""USD volume extraction from Covalent page items."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable

from .models import EndpointKind


_ZERO = Decimal(0)


def _quote(value: object) -> Decimal:
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return _ZERO
    else:
        return _ZERO
    # quotes are finite and non-negative
    if not amount.is_finite() or amount < 0:
        return _ZERO
    return amount


def _fee_quote(item: Dict[str, Any]) -> Decimal:
    fees = item.get("fees_paid")
    if isinstance(fees, dict):
        return _quote(fees.get("quote"))
    return _ZERO


def _transfers_quote(item: Dict[str, Any]) -> Decimal:
    transfers = item.get("transfers") or []
    if not isinstance(transfers, list):
        return _ZERO
    return sum(
        (_quote(transfer.get("quote")) for transfer in transfers if isinstance(transfer, dict)),
        _ZERO,
    )


def item_volume(item: Dict[str, Any], kind: EndpointKind, is_solana: bool) -> Decimal:
    if not isinstance(item, dict):
        return _ZERO
    if is_solana:
        return _quote(item.get("value_quote")) + _fee_quote(item)
    if kind is EndpointKind.TRANSFERS:
        return _transfers_quote(item)
    return _quote(item.get("value_quote"))


def page_volume(items: Iterable[Dict[str, Any]], kind: EndpointKind, is_solana: bool) -> Decimal:
    """Sum the USD volume of one page of items.

    Solana items count ``value_quote`` plus the fee quote whatever the
    endpoint; EVM transfers items count the quotes of their sub-transfers;
    EVM transactions items count ``value_quote``. Missing or non-numeric
    fields count as zero.
    """

    return sum((item_volume(item, kind, is_solana) for item in items or ()), _ZERO)
