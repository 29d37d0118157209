"""Decision cycle: rank -> admit -> buy-or-skip -> sweep positions -> sell-or-hold.

The coordinator is the only owner of the position tracker and the operation
budget. Every step decides first, reports to the notifier, and only then
mutates state, and state is only mutated after the venue confirms a swap.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from loguru import logger

from .constants import (
    DEFAULT_BUY_SIZE_SOL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SEARCH_TAG,
)
from .data.gate import MarketDataGate
from .execution.interfaces import ExecutionVenue
from .feed.interfaces import SocialFeed
from .models import (
    AcquisitionOutcome,
    Candidate,
    CycleResult,
    ExecutionResult,
    ExecutionStatus,
    GateOutcome,
    GateStatus,
    Position,
    Post,
    SellRecord,
    TradeSide,
)
from .notify import formatters
from .notify.interfaces import Notifier
from .portfolio.budget import OperationBudget
from .portfolio.tracker import PositionTracker, profit_pct
from .ranking.ranker import CandidateRanker
from .utils.uuid import generate_uuid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CycleOrchestrator:
    """Runs one decision cycle per call to `run_once`.

    Phase B (the sell sweep) iterates over the positions that were open
    before Phase A started, so a symbol bought in this cycle is first
    evaluated for sale in the next one.
    """

    def __init__(
        self,
        *,
        feed: SocialFeed,
        ranker: CandidateRanker,
        gate: MarketDataGate,
        tracker: PositionTracker,
        budget: OperationBudget,
        venue: ExecutionVenue,
        notifier: Notifier,
        search_tag: str = DEFAULT_SEARCH_TAG,
        buy_size: float = DEFAULT_BUY_SIZE_SOL,
        feed_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._feed = feed
        self._ranker = ranker
        self._gate = gate
        self._tracker = tracker
        self._budget = budget
        self._venue = venue
        self._notifier = notifier
        self._search_tag = search_tag
        self._buy_size = float(buy_size)
        self._feed_timeout = feed_timeout
        self._clock = clock or _utcnow
        self.cycles_run = 0

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def tracker(self) -> PositionTracker:
        return self._tracker

    @property
    def budget(self) -> OperationBudget:
        return self._budget

    def status(self) -> Dict[str, int]:
        snap = self._budget.snapshot()
        return {
            "operations_used": snap.count,
            "operations_limit": snap.limit,
            "tracked_positions": len(self._tracker),
        }

    def status_text(self) -> str:
        return formatters.status(self._budget.snapshot(), len(self._tracker))

    # ------------------------------------------------------------------
    # Collaborator wrappers (never raise)

    async def _notify(self, message: str) -> None:
        try:
            await self._notifier.send(message)
        except Exception:
            logger.exception("Notifier raised; message dropped")

    async def _fetch_posts(self) -> List[Post]:
        try:
            return await asyncio.wait_for(
                self._feed.search(self._search_tag), timeout=self._feed_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Feed search for {} timed out after {}s",
                self._search_tag,
                self._feed_timeout,
            )
        except Exception as exc:
            logger.warning("Error analyzing posts for {}: {}", self._search_tag, exc)
        return []

    async def _submit(
        self,
        side: TradeSide,
        symbol: str,
        size: Optional[float],
        call: Callable[[], Awaitable[ExecutionResult]],
    ) -> ExecutionResult:
        try:
            return await call()
        except Exception as exc:
            logger.exception("Venue raised on {} {}", side.value, symbol)
            return ExecutionResult(
                symbol=symbol,
                side=side,
                status=ExecutionStatus.ERROR,
                size_in_base_units=size,
                reason=str(exc) or type(exc).__name__,
            )

    # ------------------------------------------------------------------
    # Phase A: acquisition

    async def _acquire(
        self,
    ) -> Tuple[
        AcquisitionOutcome, Optional[Candidate], Optional[GateOutcome], Optional[Position]
    ]:
        if not self._budget.can_act():
            logger.info("Daily operation limit reached")
            await self._notify(formatters.limit_reached(self._budget.snapshot()))
            return AcquisitionOutcome.BUDGET_EXHAUSTED, None, None, None

        candidates = self._ranker.rank(await self._fetch_posts())
        if not candidates:
            await self._notify(formatters.no_candidates())
            return AcquisitionOutcome.NO_CANDIDATES, None, None, None

        top = candidates[0]
        gate = await self._gate.evaluate(top.symbol)
        await self._notify(formatters.candidate_report(top, gate))

        if gate.status == GateStatus.NO_DATA:
            return AcquisitionOutcome.NO_DATA, top, gate, None
        if gate.status == GateStatus.REJECTED:
            return AcquisitionOutcome.REJECTED, top, gate, None

        refusal = self._tracker.open_refusal(top.symbol)
        if refusal is not None:
            await self._notify(refusal)
            return AcquisitionOutcome.ALREADY_HELD, top, gate, None

        snapshot = gate.snapshot
        logger.info(
            "Buying {} SOL worth of {} at ${}", self._buy_size, top.symbol, snapshot.price
        )
        await self._notify(formatters.buying(top.symbol, self._buy_size, snapshot.price))
        result = await self._submit(
            TradeSide.BUY,
            top.symbol,
            self._buy_size,
            lambda: self._venue.submit_buy(top.symbol, self._buy_size),
        )
        if not result.ok:
            await self._notify(formatters.trade_failed("buying", top.symbol, result))
            return AcquisitionOutcome.BUY_FAILED, top, gate, None

        position = self._tracker.try_open(top.symbol, snapshot, self._buy_size)
        if position is None:
            # refusal was checked before the swap; only reachable if state moved underneath
            logger.error("Buy of {} settled but position could not be opened", top.symbol)
            return AcquisitionOutcome.BUY_FAILED, top, gate, None

        self._budget.record_operation()
        await self._notify(formatters.bought(position, result))
        return AcquisitionOutcome.BOUGHT, top, gate, position

    # ------------------------------------------------------------------
    # Phase B: liquidation sweep

    async def _liquidate(
        self, positions: List[Position]
    ) -> Tuple[List[SellRecord], List[str]]:
        sold: List[SellRecord] = []
        held: List[str] = []
        for position in positions:
            symbol = position.symbol
            if symbol not in self._tracker:
                continue
            if not self._budget.can_act():
                logger.info("Operation budget exhausted; holding remaining positions")
                break

            snapshot = await self._gate.fetch(symbol)
            decision = self._tracker.evaluate_exit(position, snapshot)
            if not decision.should_sell:
                logger.debug("Holding {}: {}", symbol, decision.reason)
                held.append(symbol)
                continue

            result = await self._submit(
                TradeSide.SELL,
                symbol,
                position.size_in_base_units,
                lambda: self._venue.submit_sell(symbol, position.size_in_base_units),
            )
            if not result.ok:
                await self._notify(formatters.trade_failed("selling", symbol, result))
                held.append(symbol)
                continue

            profit = profit_pct(position.entry_price, decision.price)
            logger.info(
                "Selling {} at ${} (Bought at ${})",
                symbol,
                decision.price,
                position.entry_price,
            )
            await self._notify(
                formatters.selling(symbol, decision.price, position.entry_price, profit)
            )
            self._budget.record_operation()
            self._tracker.close(symbol)
            logger.info("Successfully sold {}", symbol)
            sold.append(
                SellRecord(
                    symbol=symbol,
                    entry_price=position.entry_price,
                    exit_price=decision.price,
                    profit_pct=profit,
                    tx_signature=result.tx_signature,
                )
            )
        return sold, held

    async def _evict_stale(self) -> List[Position]:
        evicted: List[Position] = []
        max_hold = self._tracker.max_hold
        for position in self._tracker.stale_positions(self._clock()):
            self._tracker.close(position.symbol)
            hours = max_hold.total_seconds() / 3600 if max_hold else 0.0
            await self._notify(formatters.evicted(position, hours))
            evicted.append(position)
        return evicted

    # ------------------------------------------------------------------

    async def run_once(self) -> CycleResult:
        cycle_id = generate_uuid("cycle")
        started_at = self._clock()
        self.cycles_run += 1
        self._budget.start_cycle()
        logger.info("Starting cycle {} ({})", self.cycles_run, cycle_id)

        pre_phase_positions = self._tracker.positions()
        acquisition, candidate, gate, bought = await self._acquire()
        sold, held = await self._liquidate(pre_phase_positions)
        evicted = await self._evict_stale()

        result = CycleResult(
            cycle_id=cycle_id,
            started_at=started_at,
            acquisition=acquisition,
            candidate=candidate,
            gate=gate,
            bought=bought,
            sold=sold,
            held=held,
            evicted=evicted,
            budget=self._budget.snapshot(),
        )
        logger.info(
            "Cycle {} done: acquisition={} sold={} held={} evicted={} budget={}/{}",
            cycle_id,
            acquisition.value,
            len(sold),
            len(held),
            len(evicted),
            result.budget.count,
            result.budget.limit,
        )
        return result

    async def close(self) -> None:
        await self._venue.close()
