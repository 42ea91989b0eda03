"""Low-balance warnings for the operating account."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Protocol

from .chain import WEI_PER_ETH

logger = logging.getLogger(__name__)


class BalanceSource(Protocol):
    def get_balance(self) -> int: ...


def check_balance(balance_wei: int, threshold_wei: int) -> Optional[str]:
    if balance_wei < threshold_wei:
        return (
            f"Low balance: {Decimal(balance_wei) / WEI_PER_ETH} ETH "
            f"(threshold {Decimal(threshold_wei) / WEI_PER_ETH} ETH); fund the wallet for gas"
        )
    return None


class BalanceGuard:
    """Logs a warning when the account balance drops below the threshold."""

    def __init__(self, source: BalanceSource, threshold_eth: Decimal = Decimal("0.01")) -> None:
        self.source = source
        self.threshold_wei = int(Decimal(threshold_eth) * WEI_PER_ETH)

    def run(self) -> Optional[str]:
        try:
            balance_wei = int(self.source.get_balance())
        except Exception as exc:
            logger.warning("Unable to read operator balance: %s", exc)
            return None
        logger.info("Balance: %s ETH", Decimal(balance_wei) / WEI_PER_ETH)
        warning = check_balance(balance_wei, self.threshold_wei)
        if warning:
            logger.warning(warning)
        return warning


__all__ = ["BalanceGuard", "check_balance"]
