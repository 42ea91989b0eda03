"""Settings loader for the settlement monitor."""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ESPN_NFL_SCOREBOARD_URL = "https://site.api.espn.com/apis/site/v2/sports/football/nfl/scoreboard"
DEAD_ADDRESS = "0x000000000000000000000000000000000000dEaD"


def _is_hex_address(value: str) -> bool:
    if not value.startswith("0x") or len(value) != 42:
        return False
    return all(ch in "0123456789abcdef" for ch in value[2:].lower())


class SettlementSettings(BaseSettings):
    rpc_url: str = Field(default="http://localhost:8545")
    chain_id: Optional[int] = Field(default=None)

    private_key: Optional[str] = Field(default=None)
    keystore_path: Optional[Path] = Field(default=None)
    keystore_password: Optional[str] = Field(default=None)

    league_pool_address: Optional[str] = Field(default=None)
    settlement_function: str = Field(default="forwardFeesToBC")
    settlement_target_kind: Literal["name", "address"] = Field(default="name")
    settlement_targets: Optional[str] = Field(default=None)
    settlement_targets_path: Optional[Path] = Field(default=None)

    burn_function: str = Field(default="buyAndBurn")
    burn_sink_address: str = Field(default=DEAD_ADDRESS)

    poll_interval_minutes: int = Field(default=5)

    gas_strategy: Literal["estimate", "network"] = Field(default="estimate")
    gas_fallback_price_gwei: Decimal = Field(default=Decimal("1"))
    default_gas_limit: int = Field(default=250_000)
    receipt_timeout_seconds: int = Field(default=600)

    low_balance_threshold_eth: Decimal = Field(default=Decimal("0.01"))

    scoreboard_url: str = Field(default=ESPN_NFL_SCOREBOARD_URL)
    scoreboard_timeout_seconds: float = Field(default=10.0)

    twitter_api_key: Optional[str] = Field(default=None)
    twitter_api_secret: Optional[str] = Field(default=None)
    twitter_access_token: Optional[str] = Field(default=None)
    twitter_access_secret: Optional[str] = Field(default=None)
    explorer_tx_url: str = Field(default="https://basescan.org/tx/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("league_pool_address", "burn_sink_address")
    @classmethod
    def validate_address(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        candidate = value.strip()
        if not _is_hex_address(candidate):
            raise ValueError("Contract addresses must be 42-character hex strings")
        return candidate

    @field_validator("gas_fallback_price_gwei", "low_balance_threshold_eth", mode="before")
    @classmethod
    def coerce_decimal(cls, value):  # type: ignore[override]
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value))
        except Exception as exc:
            raise ValueError(f"Invalid decimal value: {value}") from exc

    @field_validator(
        "poll_interval_minutes",
        "default_gas_limit",
        "receipt_timeout_seconds",
    )
    @classmethod
    def validate_positive_int(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be positive")
        return value

    @field_validator("scoreboard_timeout_seconds", "gas_fallback_price_gwei", "low_balance_threshold_eth")
    @classmethod
    def validate_positive_number(cls, value):
        if value <= 0:
            raise ValueError("Value must be positive")
        return value

    @field_validator(
        "private_key",
        "settlement_targets",
        "twitter_api_key",
        "twitter_api_secret",
        "twitter_access_token",
        "twitter_access_secret",
    )
    @classmethod
    def blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        candidate = value.strip()
        return candidate or None

    @model_validator(mode="after")
    def validate_keystore(self) -> "SettlementSettings":
        if self.keystore_path is not None and not self.keystore_password:
            raise ValueError("KEYSTORE_PASSWORD must be set when KEYSTORE_PATH is configured")
        return self

    @property
    def poll_interval_seconds(self) -> int:
        return self.poll_interval_minutes * 60

    @property
    def twitter_configured(self) -> bool:
        """Twitter credentials are all-or-nothing; a partial set counts as absent."""
        return all(
            (
                self.twitter_api_key,
                self.twitter_api_secret,
                self.twitter_access_token,
                self.twitter_access_secret,
            )
        )


settings = SettlementSettings()
