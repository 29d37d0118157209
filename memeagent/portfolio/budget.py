"""Operation budget shared by buys and sells.

Every confirmed buy or sell costs one operation. When `count` reaches
`limit` no further operation may be recorded until the window resets.

Reset modes:
- ROLLING: a new window opens once `window` has elapsed since window_start
- MIDNIGHT: a new window opens at each UTC day boundary
- CYCLES: a new window opens every `reset_every_cycles` calls to `start_cycle`
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from loguru import logger

from ..constants import DEFAULT_BUDGET_RESET_EVERY_CYCLES, DEFAULT_BUDGET_WINDOW_HOURS
from ..exceptions import BudgetExhaustedError
from ..models import BudgetResetMode, BudgetSnapshot


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _day_start(ts: datetime) -> datetime:
    return ts.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


class OperationBudget:
    def __init__(
        self,
        limit: int,
        reset_mode: BudgetResetMode = BudgetResetMode.ROLLING,
        window: timedelta = timedelta(hours=DEFAULT_BUDGET_WINDOW_HOURS),
        reset_every_cycles: int = DEFAULT_BUDGET_RESET_EVERY_CYCLES,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = int(limit)
        self.reset_mode = BudgetResetMode(reset_mode)
        self.window = window
        self.reset_every_cycles = max(int(reset_every_cycles), 1)
        self._clock = clock or _utcnow
        self.count = 0
        self._cycles_in_window = 0
        self.window_start = self._window_origin(self._clock())

    def _window_origin(self, now: datetime) -> datetime:
        if self.reset_mode == BudgetResetMode.MIDNIGHT:
            return _day_start(now)
        return now

    def _window_elapsed(self, now: datetime) -> bool:
        if self.reset_mode == BudgetResetMode.ROLLING:
            return now - self.window_start >= self.window
        if self.reset_mode == BudgetResetMode.MIDNIGHT:
            return _day_start(now) > self.window_start
        return False

    def _reset(self, now: datetime) -> None:
        logger.info(
            "Operation budget window reset ({} used of {})", self.count, self.limit
        )
        self.count = 0
        self._cycles_in_window = 0
        self.window_start = self._window_origin(now)

    def refresh(self) -> None:
        """Open a new window if the current one has elapsed."""
        now = self._clock()
        if self._window_elapsed(now):
            self._reset(now)

    def start_cycle(self) -> None:
        """Mark the start of an orchestrator cycle (drives CYCLES mode)."""
        if self.reset_mode == BudgetResetMode.CYCLES:
            if self._cycles_in_window >= self.reset_every_cycles:
                self._reset(self._clock())
            self._cycles_in_window += 1
        else:
            self.refresh()

    def can_act(self) -> bool:
        self.refresh()
        return self.count < self.limit

    def record_operation(self) -> None:
        if not self.can_act():
            raise BudgetExhaustedError(
                f"Operation budget exhausted ({self.count}/{self.limit})"
            )
        self.count += 1

    def snapshot(self) -> BudgetSnapshot:
        self.refresh()
        return BudgetSnapshot(
            count=self.count, limit=self.limit, window_start=self.window_start
        )
