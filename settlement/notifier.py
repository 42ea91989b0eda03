"""Best-effort settlement announcements on X/Twitter."""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import tweepy

from .events import EventSnapshot

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def announce(
        self,
        game: EventSnapshot,
        winner: str,
        proof_reference: str,
        quantity: int,
    ) -> None: ...


def format_announcement(
    game: EventSnapshot,
    winner: str,
    proof_reference: str,
    quantity: int,
    explorer_tx_url: str = "",
) -> str:
    link = f"{explorer_tx_url}{proof_reference}" if explorer_tx_url else proof_reference
    return (
        f"🏈 {winner} win! ({game.name})\n"
        f"League fees forwarded and {quantity:,} tokens burned.\n"
        f"{link}"
    )


class TweetNotifier:
    def __init__(self, client: Any, explorer_tx_url: str = "") -> None:
        self.client = client
        self.explorer_tx_url = explorer_tx_url

    def announce(
        self,
        game: EventSnapshot,
        winner: str,
        proof_reference: str,
        quantity: int,
    ) -> None:
        text = format_announcement(game, winner, proof_reference, quantity, self.explorer_tx_url)
        try:
            response = self.client.create_tweet(text=text)
        except Exception as exc:
            logger.error("Announcement for %s failed: %s", game.event_id, exc)
            return
        data = getattr(response, "data", None) or {}
        logger.info("Announcement posted for %s (tweet id=%s)", game.event_id, data.get("id", "unknown"))


def build_notifier(settings) -> Optional[TweetNotifier]:
    if not settings.twitter_configured:
        logger.info("Twitter credentials incomplete; announcements disabled")
        return None
    client = tweepy.Client(
        consumer_key=settings.twitter_api_key,
        consumer_secret=settings.twitter_api_secret,
        access_token=settings.twitter_access_token,
        access_token_secret=settings.twitter_access_secret,
    )
    return TweetNotifier(client, explorer_tx_url=settings.explorer_tx_url)


__all__ = ["Notifier", "TweetNotifier", "build_notifier", "format_announcement"]
