"""Factory for creating execution venues based on configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from solana.rpc.async_api import AsyncClient

from ..exceptions import ConfigurationError, CredentialError
from ..models import TradingMode
from .interfaces import ExecutionVenue
from .jupiter_trading import JupiterExecutionVenue, MintResolver
from .paper_trading import PaperExecutionVenue
from .wallet import load_keypair

if TYPE_CHECKING:
    from ..config.settings import AgentSettings


def create_execution_venue(
    settings: AgentSettings, mint_resolver: Optional[MintResolver] = None
) -> ExecutionVenue:
    """Create an execution venue for the configured trading mode.

    Args:
        settings: Agent settings (trading mode, wallet, RPC endpoint)
        mint_resolver: Async callable mapping a symbol to its token mint.
                       Required for live trading.

    Returns:
        ExecutionVenue instance (paper or live Jupiter venue)

    Raises:
        CredentialError: If live trading is requested without a usable wallet key
        ConfigurationError: If live trading is requested without a mint resolver
    """
    if settings.trading_mode == TradingMode.PAPER:
        return PaperExecutionVenue()

    if settings.trading_mode == TradingMode.LIVE:
        if not settings.phantom_private_key:
            raise CredentialError(
                "PHANTOM_PRIVATE_KEY is required for live trading mode"
            )
        keypair = load_keypair(settings.phantom_private_key)
        if mint_resolver is None:
            raise ConfigurationError("Live trading requires a token mint resolver")
        return JupiterExecutionVenue(
            rpc_client=AsyncClient(settings.solana_rpc_url),
            keypair=keypair,
            mint_resolver=mint_resolver,
            slippage_bps=settings.slippage_bps,
            timeout=settings.request_timeout_seconds,
        )

    raise ConfigurationError(f"Unsupported trading mode: {settings.trading_mode}")
