from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from loguru import logger

from .config.settings import AgentSettings
from .coordinator import CycleOrchestrator
from .data.gate import AdmissionBands, MarketDataGate
from .data.interfaces import MarketDataSource
from .data.market import DexScreenerMarketDataSource
from .execution.factory import create_execution_venue
from .execution.interfaces import ExecutionVenue
from .feed.interfaces import SocialFeed
from .feed.x_search import StaticFeed, XRecentSearchFeed
from .models import CycleResult
from .notify.interfaces import Notifier
from .notify.telegram import LogNotifier, TelegramNotifier
from .portfolio.budget import OperationBudget
from .portfolio.tracker import PositionTracker
from .ranking.ranker import CandidateRanker
from .sentiment.scorer import LexiconSentimentScorer


@dataclass
class AgentRuntime:
    settings: AgentSettings
    orchestrator: CycleOrchestrator

    async def run_cycle(self) -> CycleResult:
        return await self.orchestrator.run_once()

    async def close(self) -> None:
        await self.orchestrator.close()


def _default_feed(settings: AgentSettings) -> SocialFeed:
    if settings.x_bearer_token:
        return XRecentSearchFeed(
            bearer_token=settings.x_bearer_token,
            timeout=settings.request_timeout_seconds,
        )
    logger.warning("X_BEARER_TOKEN not set; using an empty feed")
    return StaticFeed()


def _default_notifier(settings: AgentSettings) -> Notifier:
    if settings.telegram_token and settings.telegram_chat_id:
        return TelegramNotifier(
            chat_id=settings.telegram_chat_id,
            token=settings.telegram_token,
            timeout=settings.request_timeout_seconds,
        )
    logger.warning("Telegram chat not configured; notifications go to the log only")
    return LogNotifier()


def create_agent_runtime(
    settings: AgentSettings,
    feed: Optional[SocialFeed] = None,
    market_data_source: Optional[MarketDataSource] = None,
    venue: Optional[ExecutionVenue] = None,
    notifier: Optional[Notifier] = None,
) -> AgentRuntime:
    """Wire every component of the agent from settings.

    Collaborators may be injected (tests, dry runs); anything left as None is
    built from configuration.

    Raises:
        CredentialError: If live trading is configured without a usable wallet key
        ConfigurationError: If the execution venue cannot be configured
    """
    bands = AdmissionBands(
        price_ceiling=settings.price_ceiling,
        cap_target=settings.market_cap_threshold,
        cap_band=settings.market_cap_band,
    )

    if market_data_source is None:
        market_data_source = DexScreenerMarketDataSource(
            timeout=settings.request_timeout_seconds
        )
    if venue is None:
        resolver = getattr(market_data_source, "resolve_mint", None)
        venue = create_execution_venue(settings, mint_resolver=resolver)

    max_hold = (
        timedelta(hours=settings.max_hold_hours) if settings.max_hold_hours else None
    )
    tracker = PositionTracker(
        bands=bands,
        target_multiplier=settings.target_multiplier_min,
        max_open_positions=settings.max_open_positions,
        max_hold=max_hold,
    )
    budget = OperationBudget(
        limit=settings.operation_limit,
        reset_mode=settings.budget_reset_mode,
        window=timedelta(hours=settings.budget_window_hours),
        reset_every_cycles=settings.budget_reset_every_cycles,
    )

    orchestrator = CycleOrchestrator(
        feed=feed or _default_feed(settings),
        ranker=CandidateRanker(
            scorer=LexiconSentimentScorer(), deny_list=settings.deny_list
        ),
        gate=MarketDataGate(
            market_data_source, bands=bands, timeout=settings.request_timeout_seconds
        ),
        tracker=tracker,
        budget=budget,
        venue=venue,
        notifier=notifier or _default_notifier(settings),
        search_tag=settings.search_tag,
        buy_size=settings.buy_size_sol,
        feed_timeout=settings.request_timeout_seconds,
    )
    logger.info(
        "Created agent runtime: mode={} limit={} interval={}s",
        settings.trading_mode.value,
        settings.operation_limit,
        settings.cycle_interval_seconds,
    )
    return AgentRuntime(settings=settings, orchestrator=orchestrator)
