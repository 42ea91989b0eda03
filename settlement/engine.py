"""Settlement engine: at-most-once on-chain settlement of finished games."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Any, Iterable, Optional, Protocol

from .burn import extract_burned_quantity
from .chain import (
    ERC20_DECIMALS_ABI,
    FeeParameters,
    TransactionIntent,
    parameterless_abi,
    settlement_pool_abi,
)
from .events import EventSnapshot, resolve_winner
from .gas import GasStrategy
from .notifier import Notifier
from .targets import SettlementTarget, TargetMap, TargetMappingError

logger = logging.getLogger(__name__)


class SettlementChain(Protocol):
    def submit(self, intent: TransactionIntent, fees: FeeParameters) -> str: ...

    def wait_for_receipt(self, tx_hash: str) -> Any: ...

    def call(self, address: str, abi: Any, function_name: str, *args: Any) -> Any: ...


@dataclass(frozen=True)
class PrimaryReceipt:
    tx_hash: str
    block_number: Optional[int]
    gas_used: Optional[int]


@dataclass(frozen=True)
class SecondaryOutcome:
    attempted: bool
    tx_hash: Optional[str] = None
    burned: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.attempted and self.error is None


def _receipt_field(receipt: Any, name: str) -> Any:
    if hasattr(receipt, "get"):
        value = receipt.get(name)
        if value is not None:
            return value
    return getattr(receipt, name, None)


class SettlementEngine:
    def __init__(
        self,
        settings,
        chain: SettlementChain,
        targets: TargetMap,
        gas_strategy: GasStrategy,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.settings = settings
        self.chain = chain
        self.targets = targets
        self.gas_strategy = gas_strategy
        self.notifier = notifier

        self._settled: set[str] = set()
        self._initialized = False
        self._pool_abi = settlement_pool_abi(settings.settlement_function, targets.kind)
        self._burn_abi = parameterless_abi(settings.burn_function)

    @property
    def settled(self) -> AbstractSet[str]:
        return frozenset(self._settled)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def process_cycle(self, snapshots: Iterable[EventSnapshot]) -> None:
        """Evaluate one scoreboard snapshot, settling newly finished games.

        The first non-empty snapshot only records games that are already
        final as a baseline; no transactions are sent for them. An empty
        snapshot (failed fetch) leaves the engine uninitialized.
        """
        snapshots = list(snapshots)
        if not snapshots:
            return
        baseline = not self._initialized
        for snapshot in snapshots:
            self._process_event(snapshot, baseline=baseline)
        if baseline:
            logger.info("Initialized with %s games already final", len(self._settled))
        self._initialized = True

    def _process_event(self, snapshot: EventSnapshot, *, baseline: bool) -> None:
        if not snapshot.completed or snapshot.event_id in self._settled:
            return

        winner = resolve_winner(snapshot)
        if winner is None:
            logger.info("Game %s has no winner (tie or unparsable score), skipping", snapshot.name)
            return

        try:
            target = self.targets.lookup(winner)
        except TargetMappingError as exc:
            logger.error("%s (game %s)", exc, snapshot.event_id)
            return

        if baseline:
            logger.debug("Game %s already final at startup; marking settled", snapshot.event_id)
            self._settled.add(snapshot.event_id)
            return

        logger.info(
            "Processing completed game %s: winner=%s target=%s",
            snapshot.name,
            winner,
            target.value,
        )
        primary = self._settle_primary(snapshot, target)
        if primary is None:
            return

        self._settled.add(snapshot.event_id)
        secondary = self._attempt_secondary(target)

        if secondary.succeeded and secondary.tx_hash is not None:
            self._announce(snapshot, winner, secondary.tx_hash, secondary.burned or 0)

    def _settle_primary(self, snapshot: EventSnapshot, target: SettlementTarget) -> Optional[PrimaryReceipt]:
        intent = TransactionIntent(
            to=self.settings.league_pool_address,
            abi=self._pool_abi,
            function=self.settings.settlement_function,
            args=(target.argument,),
        )
        try:
            fees = self.gas_strategy.price(intent)
            tx_hash = self.chain.submit(intent, fees)
            logger.info("Transaction sent: %s; waiting for confirmation", tx_hash)
            receipt = self.chain.wait_for_receipt(tx_hash)
        except Exception as exc:
            logger.error("Error settling game %s: %s", snapshot.event_id, exc)
            return None

        result = PrimaryReceipt(
            tx_hash=tx_hash,
            block_number=_receipt_field(receipt, "blockNumber"),
            gas_used=_receipt_field(receipt, "gasUsed"),
        )
        logger.info(
            "Transaction confirmed in block %s (gas used %s)",
            result.block_number,
            result.gas_used,
        )
        return result

    def _attempt_secondary(self, target: SettlementTarget) -> SecondaryOutcome:
        if not target.secondary_address:
            return SecondaryOutcome(attempted=False)

        intent = TransactionIntent(
            to=target.secondary_address,
            abi=self._burn_abi,
            function=self.settings.burn_function,
        )
        try:
            fees = self.gas_strategy.price(intent)
            tx_hash = self.chain.submit(intent, fees)
            receipt = self.chain.wait_for_receipt(tx_hash)
            decimals = int(self.chain.call(target.secondary_address, ERC20_DECIMALS_ABI, "decimals"))
        except Exception as exc:
            # Expected while the buy-back preconditions are not met yet.
            logger.warning("%s on %s skipped: %s", self.settings.burn_function, target.secondary_address, exc)
            return SecondaryOutcome(attempted=True, error=str(exc))

        burned = extract_burned_quantity(
            _receipt_field(receipt, "logs") or [],
            self.settings.burn_sink_address,
            decimals,
        )
        logger.info("%s confirmed (tx=%s burned=%s)", self.settings.burn_function, tx_hash, burned)
        return SecondaryOutcome(attempted=True, tx_hash=tx_hash, burned=burned)

    def _announce(self, snapshot: EventSnapshot, winner: str, proof_reference: str, quantity: int) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.announce(snapshot, winner, proof_reference, quantity)
        except Exception as exc:
            logger.error("Notifier failed for %s: %s", snapshot.event_id, exc)


__all__ = ["PrimaryReceipt", "SecondaryOutcome", "SettlementEngine"]
