"""Burned-quantity extraction from ERC-20 Transfer logs."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak, to_bytes

TRANSFER_TOPIC = keccak(text="Transfer(address,address,uint256)")


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return to_bytes(hexstr=str(value))


def decode_transfer(log: Mapping[str, Any]) -> Optional[tuple[str, str, int]]:
    """Return (from, to, value) for a Transfer log, or None for other events."""
    topics = [_as_bytes(topic) for topic in log.get("topics") or []]
    if len(topics) < 3 or topics[0] != TRANSFER_TOPIC:
        return None
    sender = "0x" + topics[1][-20:].hex()
    recipient = "0x" + topics[2][-20:].hex()
    (value,) = decode(["uint256"], _as_bytes(log.get("data") or b""))
    return sender, recipient, int(value)


def to_whole_units(raw_value: int, decimals: int) -> int:
    scaled = Decimal(raw_value) / (Decimal(10) ** int(decimals))
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def extract_burned_quantity(
    logs: Iterable[Mapping[str, Any]],
    sink_address: str,
    decimals: int,
) -> int:
    """Whole-unit amount of the first Transfer to ``sink_address``; 0 if none.

    Log entries that fail to decode are skipped.
    """
    sink = sink_address.lower()
    for log in logs:
        try:
            transfer = decode_transfer(log)
        except (DecodingError, ValueError, TypeError, AttributeError):
            continue
        if transfer is None:
            continue
        _, recipient, value = transfer
        if recipient.lower() == sink:
            return to_whole_units(value, decimals)
    return 0


__all__ = ["TRANSFER_TOPIC", "decode_transfer", "extract_burned_quantity", "to_whole_units"]
