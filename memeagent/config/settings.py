"""Environment-backed settings for the agent.

Values are read from process environment variables and an optional `.env`
file in the working directory. Field names map 1:1 to upper-case variables
(e.g. `max_daily_operations` <- `MAX_DAILY_OPERATIONS`).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..constants import (
    DEFAULT_BUDGET_RESET_EVERY_CYCLES,
    DEFAULT_BUDGET_WINDOW_HOURS,
    DEFAULT_BUY_SIZE_SOL,
    DEFAULT_CYCLE_INTERVAL_SECONDS,
    DEFAULT_DENY_LIST,
    DEFAULT_MARKET_CAP_BAND,
    DEFAULT_MARKET_CAP_THRESHOLD,
    DEFAULT_MAX_DAILY_OPERATIONS,
    DEFAULT_PRICE_CEILING,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SEARCH_TAG,
    DEFAULT_SLIPPAGE_BPS,
    DEFAULT_SOLANA_RPC_URL,
    DEFAULT_TARGET_MULTIPLIER_MAX,
    DEFAULT_TARGET_MULTIPLIER_MIN,
    TARGET_MULTIPLIER_CEILING,
    TARGET_MULTIPLIER_FLOOR,
)
from ..exceptions import ConfigurationError
from ..models import BudgetResetMode, TradingMode


class AgentSettings(BaseSettings):
    """All runtime configuration for the agent."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ---- collaborators ----
    telegram_token: Optional[str] = Field(default=None)
    telegram_chat_id: Optional[str] = Field(default=None)
    x_bearer_token: Optional[str] = Field(default=None)
    search_tag: str = Field(default=DEFAULT_SEARCH_TAG)

    trading_mode: TradingMode = Field(default=TradingMode.PAPER)
    solana_rpc_url: str = Field(default=DEFAULT_SOLANA_RPC_URL)
    phantom_private_key: Optional[str] = Field(
        default=None, description="Wallet secret key as a JSON array of 64 bytes"
    )
    buy_size_sol: float = Field(default=DEFAULT_BUY_SIZE_SOL, gt=0)
    slippage_bps: int = Field(default=DEFAULT_SLIPPAGE_BPS, ge=0)

    # ---- decision constants ----
    max_daily_operations: int = Field(
        default=DEFAULT_MAX_DAILY_OPERATIONS,
        gt=0,
        description="Round trips per window; the operation limit is twice this",
    )
    target_multiplier_min: float = Field(
        default=DEFAULT_TARGET_MULTIPLIER_MIN,
        ge=TARGET_MULTIPLIER_FLOOR,
        le=TARGET_MULTIPLIER_CEILING,
    )
    target_multiplier_max: float = Field(
        default=DEFAULT_TARGET_MULTIPLIER_MAX,
        ge=TARGET_MULTIPLIER_FLOOR,
        le=TARGET_MULTIPLIER_CEILING,
    )
    market_cap_threshold: float = Field(default=DEFAULT_MARKET_CAP_THRESHOLD, gt=0)
    market_cap_band: float = Field(default=DEFAULT_MARKET_CAP_BAND, ge=0, lt=1)
    price_ceiling: float = Field(default=DEFAULT_PRICE_CEILING, gt=0)
    deny_list: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_DENY_LIST)
    )

    # ---- scheduling and budget ----
    cycle_interval_seconds: float = Field(default=DEFAULT_CYCLE_INTERVAL_SECONDS, gt=0)
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    budget_reset_mode: BudgetResetMode = Field(default=BudgetResetMode.ROLLING)
    budget_window_hours: float = Field(default=DEFAULT_BUDGET_WINDOW_HOURS, gt=0)
    budget_reset_every_cycles: int = Field(
        default=DEFAULT_BUDGET_RESET_EVERY_CYCLES, gt=0
    )
    max_hold_hours: Optional[float] = Field(default=None, gt=0)
    max_open_positions: Optional[int] = Field(default=None, gt=0)

    # ---- logging ----
    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))

    @field_validator("deny_list", mode="before")
    @classmethod
    def split_deny_list(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        return [str(term).strip().lower() for term in v if str(term).strip()]

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def check_multiplier_range(self):
        if self.target_multiplier_min > self.target_multiplier_max:
            raise ValueError(
                "TARGET_MULTIPLIER_MIN must not exceed TARGET_MULTIPLIER_MAX"
            )
        return self

    @property
    def operation_limit(self) -> int:
        """Operations allowed per window: one buy and one sell per round trip."""
        return self.max_daily_operations * 2


def load_settings(**overrides) -> AgentSettings:
    """Build settings from the environment, raising ConfigurationError on bad values."""
    try:
        return AgentSettings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


@lru_cache()
def get_settings() -> AgentSettings:
    return load_settings()
