import pytest

from memeagent.config.settings import AgentSettings, load_settings
from memeagent.exceptions import ConfigurationError
from memeagent.models import BudgetResetMode, TradingMode


def test_defaults():
    settings = load_settings(_env_file=None)

    assert settings.search_tag == "#memeCoin"
    assert settings.trading_mode == TradingMode.PAPER
    assert settings.max_daily_operations == 5
    assert settings.operation_limit == 10
    assert settings.target_multiplier_min == 2.0
    assert settings.price_ceiling == 0.01
    assert settings.market_cap_threshold == 5000
    assert settings.deny_list == ["scam", "rug"]
    assert settings.cycle_interval_seconds == 14400
    assert settings.budget_reset_mode == BudgetResetMode.ROLLING
    assert settings.max_hold_hours is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MAX_DAILY_OPERATIONS", "3")
    monkeypatch.setenv("DENY_LIST", "Scam, rug ,honeypot,")
    monkeypatch.setenv("TRADING_MODE", "live")
    monkeypatch.setenv("BUDGET_RESET_MODE", "midnight")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = AgentSettings(_env_file=None)

    assert settings.operation_limit == 6
    assert settings.deny_list == ["scam", "rug", "honeypot"]
    assert settings.trading_mode == TradingMode.LIVE
    assert settings.budget_reset_mode == BudgetResetMode.MIDNIGHT
    assert settings.log_level == "DEBUG"


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("SEARCH_TAG=#solana\nMAX_HOLD_HOURS=72\n")

    settings = AgentSettings(_env_file=env_file)

    assert settings.search_tag == "#solana"
    assert settings.max_hold_hours == 72


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_daily_operations": 0},
        {"target_multiplier_min": 6, "target_multiplier_max": 5},
        {"target_multiplier_min": 1.5},
        {"target_multiplier_max": 6},
        {"market_cap_band": 1.5},
        {"trading_mode": "margin"},
    ],
)
def test_invalid_values_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        load_settings(_env_file=None, **overrides)
