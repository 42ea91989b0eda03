"""CLI entrypoint for the settlement monitor."""
from __future__ import annotations

import logging
import sys

from .balance import BalanceGuard
from .chain import ChainClient
from .config import settings
from .engine import SettlementEngine
from .feed import ScoreboardFeed
from .gas import build_gas_strategy
from .notifier import build_notifier
from .poller import SettlementPoller
from .targets import load_target_map


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s:%(lineno)d | %(message)s",
        stream=sys.stdout,
    )


def main() -> None:
    configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting NFL settlement monitor")

    if not settings.league_pool_address:
        raise SystemExit("LEAGUE_POOL_ADDRESS must be set")
    if not settings.private_key and not settings.keystore_path:
        raise SystemExit("PRIVATE_KEY or KEYSTORE_PATH must be set")

    targets = load_target_map(
        kind=settings.settlement_target_kind,
        inline=settings.settlement_targets,
        path=settings.settlement_targets_path,
    )

    chain = ChainClient(
        rpc_url=settings.rpc_url,
        chain_id=settings.chain_id,
        private_key=settings.private_key,
        keystore_path=settings.keystore_path,
        keystore_password=settings.keystore_password,
        receipt_timeout_seconds=settings.receipt_timeout_seconds,
    )
    logger.info("Wallet: %s", chain.sender)
    logger.info("LeaguePool: %s", settings.league_pool_address)

    gas_strategy = build_gas_strategy(
        settings.gas_strategy,
        chain,
        fallback_price_gwei=settings.gas_fallback_price_gwei,
        default_gas_limit=settings.default_gas_limit,
    )
    logger.info("Gas strategy: %s", settings.gas_strategy)

    engine = SettlementEngine(
        settings,
        chain,
        targets,
        gas_strategy,
        notifier=build_notifier(settings),
    )
    poller = SettlementPoller(
        feed=ScoreboardFeed(settings.scoreboard_url, timeout=settings.scoreboard_timeout_seconds),
        engine=engine,
        balance_guard=BalanceGuard(chain, settings.low_balance_threshold_eth),
        interval_seconds=settings.poll_interval_seconds,
    )
    poller.run_forever()


if __name__ == "__main__":
    main()
