from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from loguru import logger

from ..constants import (
    DEFAULT_TARGET_MULTIPLIER_MIN,
    TARGET_MULTIPLIER_CEILING,
    TARGET_MULTIPLIER_FLOOR,
)
from ..data.gate import AdmissionBands
from ..models import ExitAction, ExitDecision, MarketSnapshot, Position


def profit_pct(entry_price: float, current_price: float) -> float:
    """Percentage gain from entry to current price, rounded to two decimals."""
    return round((current_price - entry_price) / entry_price * 100, 2)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PositionTracker:
    """Holds at most one open Position per symbol.

    The tracker only decides and stores; it never talks to the venue. The
    coordinator calls `try_open` / `close` after the venue has confirmed the
    corresponding swap.

    Optional limits:
    - max_open_positions: refuse new positions once this many are open
    - max_hold: positions older than this are reported by `stale_positions`
    """

    def __init__(
        self,
        bands: Optional[AdmissionBands] = None,
        target_multiplier: float = DEFAULT_TARGET_MULTIPLIER_MIN,
        max_open_positions: Optional[int] = None,
        max_hold: Optional[timedelta] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not TARGET_MULTIPLIER_FLOOR <= target_multiplier <= TARGET_MULTIPLIER_CEILING:
            raise ValueError(
                f"target_multiplier must be within "
                f"[{TARGET_MULTIPLIER_FLOOR:g}, {TARGET_MULTIPLIER_CEILING:g}]"
            )
        self.bands = bands or AdmissionBands()
        self.target_multiplier = float(target_multiplier)
        self.max_open_positions = max_open_positions
        self.max_hold = max_hold
        self._clock = clock or _utcnow
        # dicts keep insertion order, which is the sweep order
        self._positions: Dict[str, Position] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._positions

    def get(self, symbol: str) -> Optional[Position]:
        return self._positions.get(symbol)

    def positions(self) -> List[Position]:
        """Open positions in the order they were opened."""
        return list(self._positions.values())

    def open_refusal(self, symbol: str) -> Optional[str]:
        """Why a new position for `symbol` cannot be opened, or None if it can.

        Only covers tracker-side limits; price and market-cap bands are
        checked against a snapshot in `try_open`.
        """
        if symbol in self._positions:
            return f"Already holding {symbol}; skipping buy."
        if (
            self.max_open_positions is not None
            and len(self._positions) >= self.max_open_positions
        ):
            return (
                f"Max open positions ({self.max_open_positions}) reached; "
                f"skipping {symbol}."
            )
        return None

    def try_open(
        self, symbol: str, snapshot: MarketSnapshot, size_in_base_units: float
    ) -> Optional[Position]:
        """Open a position at the snapshot price, or return None if not allowed."""
        refusal = self.open_refusal(symbol)
        if refusal is not None:
            logger.info("Not opening {}: {}", symbol, refusal)
            return None
        reason = self.bands.rejection_reason(symbol, snapshot)
        if reason is not None:
            logger.info("Not opening {}: {}", symbol, reason)
            return None

        position = Position(
            symbol=symbol,
            entry_price=snapshot.price,
            target_multiplier=self.target_multiplier,
            size_in_base_units=size_in_base_units,
            opened_at=self._clock(),
        )
        self._positions[symbol] = position
        logger.info(
            "Opened position {} @ {} target x{} ({} SOL)",
            symbol,
            position.entry_price,
            position.target_multiplier,
            size_in_base_units,
        )
        return position

    @staticmethod
    def evaluate_exit(
        position: Position, snapshot: Optional[MarketSnapshot]
    ) -> ExitDecision:
        """Sell iff price >= entry * multiplier. Missing data always holds."""
        target = position.target_price
        if snapshot is None:
            return ExitDecision(
                symbol=position.symbol,
                action=ExitAction.HOLD,
                target_price=target,
                reason="market data unavailable",
            )
        if snapshot.price >= target:
            return ExitDecision(
                symbol=position.symbol,
                action=ExitAction.SELL,
                price=snapshot.price,
                target_price=target,
                reason="target reached",
            )
        return ExitDecision(
            symbol=position.symbol,
            action=ExitAction.HOLD,
            price=snapshot.price,
            target_price=target,
            reason="below target",
        )

    def close(self, symbol: str) -> Optional[Position]:
        position = self._positions.pop(symbol, None)
        if position is not None:
            logger.info("Closed position {}", symbol)
        return position

    def stale_positions(self, now: Optional[datetime] = None) -> List[Position]:
        """Positions held longer than max_hold (empty when no limit is set)."""
        if self.max_hold is None:
            return []
        now = now or self._clock()
        return [p for p in self._positions.values() if now - p.opened_at >= self.max_hold]
