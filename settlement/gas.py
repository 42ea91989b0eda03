"""Fee pricing policies for settlement transactions."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol

from web3.exceptions import ContractLogicError

from .chain import FeeParameters, TransactionIntent, WEI_PER_GWEI

logger = logging.getLogger(__name__)

GAS_BUFFER_NUMERATOR = 120
GAS_BUFFER_DENOMINATOR = 100
DEFAULT_FALLBACK_PRICE_GWEI = Decimal("1")
DEFAULT_GAS_LIMIT = 250_000


class GasOracle(Protocol):
    def gas_price(self) -> int: ...

    def estimate_gas(self, intent: TransactionIntent) -> int: ...


class GasStrategy(Protocol):
    def price(self, intent: TransactionIntent) -> FeeParameters: ...


def gwei_to_wei(amount_gwei: Decimal) -> int:
    return int(Decimal(amount_gwei) * WEI_PER_GWEI)


class _BaseStrategy:
    def __init__(
        self,
        oracle: GasOracle,
        *,
        fallback_price_gwei: Decimal = DEFAULT_FALLBACK_PRICE_GWEI,
        default_gas_limit: int = DEFAULT_GAS_LIMIT,
    ) -> None:
        self.oracle = oracle
        self.fallback_price_wei = gwei_to_wei(fallback_price_gwei)
        self.default_gas_limit = default_gas_limit

    def _network_price(self) -> int:
        try:
            return int(self.oracle.gas_price())
        except Exception as exc:
            logger.warning(
                "Gas price query failed; using fallback %s wei: %s",
                self.fallback_price_wei,
                exc,
            )
            return self.fallback_price_wei


class EstimateAndBufferStrategy(_BaseStrategy):
    """Simulate the exact call and pad the estimate by 20%.

    A simulated revert propagates so the call is never broadcast; only
    transport or RPC failures fall back to the default gas limit.
    """

    def price(self, intent: TransactionIntent) -> FeeParameters:
        try:
            estimate = int(self.oracle.estimate_gas(intent))
        except ContractLogicError as exc:
            logger.info("Simulation of %s reverted: %s", intent.function, exc)
            raise
        except Exception as exc:
            logger.warning(
                "Gas estimation for %s failed; using default limit %s: %s",
                intent.function,
                self.default_gas_limit,
                exc,
            )
            gas_limit = self.default_gas_limit
        else:
            gas_limit = estimate * GAS_BUFFER_NUMERATOR // GAS_BUFFER_DENOMINATOR
            logger.info("Estimated gas for %s: %s (buffered %s)", intent.function, estimate, gas_limit)
        return FeeParameters(gas_limit=gas_limit, gas_price_wei=self._network_price())


class NetworkPriceStrategy(_BaseStrategy):
    """Use the network's suggested price, falling back to a fixed constant."""

    def price(self, intent: TransactionIntent) -> FeeParameters:
        return FeeParameters(gas_limit=self.default_gas_limit, gas_price_wei=self._network_price())


def build_gas_strategy(
    name: str,
    oracle: GasOracle,
    *,
    fallback_price_gwei: Decimal = DEFAULT_FALLBACK_PRICE_GWEI,
    default_gas_limit: int = DEFAULT_GAS_LIMIT,
) -> GasStrategy:
    strategies = {
        "estimate": EstimateAndBufferStrategy,
        "network": NetworkPriceStrategy,
    }
    try:
        strategy_cls = strategies[name]
    except KeyError as exc:
        raise ValueError(f"Unknown gas strategy: {name}") from exc
    return strategy_cls(
        oracle,
        fallback_price_gwei=fallback_price_gwei,
        default_gas_limit=default_gas_limit,
    )


__all__ = [
    "EstimateAndBufferStrategy",
    "GasStrategy",
    "NetworkPriceStrategy",
    "build_gas_strategy",
    "gwei_to_wei",
]
