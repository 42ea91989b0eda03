from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from settlement.events import CompetitorRecord, EventSnapshot
from settlement.notifier import TweetNotifier, build_notifier, format_announcement

GAME = EventSnapshot(
    event_id="401",
    name="Miami Dolphins at Buffalo Bills",
    completed=True,
    competitors=(
        CompetitorRecord("Buffalo Bills", "Bills", 27),
        CompetitorRecord("Miami Dolphins", "Dolphins", 20),
    ),
)


def make_settings(**overrides):
    values = {
        "twitter_api_key": "key",
        "twitter_api_secret": "secret",
        "twitter_access_token": "token",
        "twitter_access_secret": "token-secret",
        "explorer_tx_url": "https://basescan.org/tx/",
    }
    values.update(overrides)
    values["twitter_configured"] = all(
        values[name]
        for name in ("twitter_api_key", "twitter_api_secret", "twitter_access_token", "twitter_access_secret")
    )
    return SimpleNamespace(**values)


def test_announcement_text_includes_winner_quantity_and_link():
    text = format_announcement(GAME, "Buffalo Bills", "0xabc", 12_500, "https://basescan.org/tx/")
    assert "Buffalo Bills" in text
    assert "12,500" in text
    assert "https://basescan.org/tx/0xabc" in text


def test_announce_posts_tweet():
    client = MagicMock()
    client.create_tweet.return_value = SimpleNamespace(data={"id": "1"})
    TweetNotifier(client).announce(GAME, "Buffalo Bills", "0xabc", 15)

    client.create_tweet.assert_called_once()
    assert "15" in client.create_tweet.call_args.kwargs["text"]


def test_announce_swallows_client_errors():
    client = MagicMock()
    client.create_tweet.side_effect = RuntimeError("403 Forbidden")
    TweetNotifier(client).announce(GAME, "Buffalo Bills", "0xabc", 15)
    assert client.create_tweet.call_count == 1


@patch("settlement.notifier.tweepy.Client")
def test_build_notifier_requires_all_credentials(mock_client):
    assert build_notifier(make_settings(twitter_access_secret=None)) is None
    mock_client.assert_not_called()

    notifier = build_notifier(make_settings())
    assert isinstance(notifier, TweetNotifier)
    mock_client.assert_called_once_with(
        consumer_key="key",
        consumer_secret="secret",
        access_token="token",
        access_token_secret="token-secret",
    )
