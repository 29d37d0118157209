"""Buy admission gate over live market data.

The gate distinguishes "no data" (lookup failed, timed out or returned
nothing) from "rejected" (data present but outside the configured bands).
Both block a buy; only the logging differs.
"""

import asyncio
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field

from ..constants import (
    DEFAULT_MARKET_CAP_BAND,
    DEFAULT_MARKET_CAP_THRESHOLD,
    DEFAULT_PRICE_CEILING,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from ..models import GateOutcome, GateStatus, MarketSnapshot
from .interfaces import MarketDataSource


class AdmissionBands(BaseModel):
    """Price ceiling and market-cap band a token must sit in to be bought."""

    price_ceiling: float = Field(default=DEFAULT_PRICE_CEILING, gt=0)
    cap_target: float = Field(default=DEFAULT_MARKET_CAP_THRESHOLD, gt=0)
    cap_band: float = Field(default=DEFAULT_MARKET_CAP_BAND, ge=0, lt=1)

    @property
    def cap_floor(self) -> float:
        return self.cap_target * (1 - self.cap_band)

    @property
    def cap_ceiling(self) -> float:
        return self.cap_target * (1 + self.cap_band)

    def rejection_reason(self, symbol: str, snapshot: MarketSnapshot) -> Optional[str]:
        """Return why `snapshot` fails admission, or None when it passes."""
        if snapshot.price <= 0:
            return f"Price of {symbol} (${snapshot.price}) is not positive."
        if snapshot.price >= self.price_ceiling:
            return f"Price of {symbol} (${snapshot.price}) is too high to buy."
        if not self.cap_floor <= snapshot.market_cap <= self.cap_ceiling:
            return (
                f"Market Cap (${snapshot.market_cap}) not around "
                f"${self.cap_target:g}."
            )
        return None


class MarketDataGate:
    """Wraps a MarketDataSource with a per-call timeout and the admission bands."""

    def __init__(
        self,
        source: MarketDataSource,
        bands: Optional[AdmissionBands] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._source = source
        self.bands = bands or AdmissionBands()
        self._timeout = timeout

    async def fetch(self, symbol: str) -> Optional[MarketSnapshot]:
        """Fetch a fresh snapshot; any failure or timeout yields None."""
        try:
            return await asyncio.wait_for(
                self._source.lookup(symbol), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Market data lookup for {} timed out after {}s", symbol, self._timeout
            )
        except Exception:
            logger.exception("Market data lookup for {} failed", symbol)
        return None

    def admit(self, symbol: str, snapshot: Optional[MarketSnapshot]) -> GateOutcome:
        """Pure admission decision for an already fetched snapshot."""
        if snapshot is None:
            return GateOutcome(
                symbol=symbol,
                status=GateStatus.NO_DATA,
                reason=f"Cannot buy {symbol}: Data not available.",
            )
        reason = self.bands.rejection_reason(symbol, snapshot)
        if reason is not None:
            return GateOutcome(
                symbol=symbol,
                status=GateStatus.REJECTED,
                snapshot=snapshot,
                reason=reason,
            )
        return GateOutcome(symbol=symbol, status=GateStatus.ADMITTED, snapshot=snapshot)

    async def evaluate(self, symbol: str) -> GateOutcome:
        outcome = self.admit(symbol, await self.fetch(symbol))
        if outcome.status == GateStatus.NO_DATA:
            logger.warning("No market data for {}; buy blocked", symbol)
        elif outcome.status == GateStatus.REJECTED:
            logger.info("Admission rejected for {}: {}", symbol, outcome.reason)
        return outcome
