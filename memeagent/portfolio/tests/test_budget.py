from datetime import datetime, timedelta, timezone

import pytest

from memeagent.exceptions import BudgetExhaustedError
from memeagent.models import BudgetResetMode
from memeagent.portfolio.budget import OperationBudget

T0 = datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _exhaust(budget: OperationBudget) -> None:
    for _ in range(budget.limit):
        budget.record_operation()


def test_counts_up_to_limit():
    budget = OperationBudget(limit=3, clock=FakeClock())

    for expected in (1, 2, 3):
        assert budget.can_act()
        budget.record_operation()
        assert budget.count == expected

    assert not budget.can_act()
    with pytest.raises(BudgetExhaustedError):
        budget.record_operation()
    assert budget.count == 3


def test_zero_limit_never_acts():
    assert not OperationBudget(limit=0, clock=FakeClock()).can_act()


def test_negative_limit_is_invalid():
    with pytest.raises(ValueError):
        OperationBudget(limit=-1)


def test_snapshot():
    budget = OperationBudget(limit=10, clock=FakeClock())
    budget.record_operation()

    snap = budget.snapshot()
    assert (snap.count, snap.limit, snap.remaining) == (1, 10, 9)
    assert snap.window_start == T0


def test_rolling_window_resets_after_window():
    clock = FakeClock()
    budget = OperationBudget(limit=2, window=timedelta(hours=24), clock=clock)
    _exhaust(budget)

    clock.now = T0 + timedelta(hours=23, minutes=59)
    assert not budget.can_act()

    clock.now = T0 + timedelta(hours=24)
    assert budget.can_act()
    assert budget.count == 0
    assert budget.snapshot().window_start == clock.now


def test_midnight_window_resets_at_utc_day_boundary():
    clock = FakeClock()
    budget = OperationBudget(
        limit=2, reset_mode=BudgetResetMode.MIDNIGHT, clock=clock
    )
    assert budget.window_start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    _exhaust(budget)

    clock.now = datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)
    assert not budget.can_act()

    clock.now = datetime(2024, 1, 2, 0, 0, 1, tzinfo=timezone.utc)
    assert budget.can_act()
    assert budget.window_start == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_cycles_mode_resets_every_n_cycles():
    clock = FakeClock()
    budget = OperationBudget(
        limit=1,
        reset_mode=BudgetResetMode.CYCLES,
        reset_every_cycles=3,
        clock=clock,
    )
    budget.start_cycle()
    budget.record_operation()

    # time alone never resets in cycles mode
    clock.now = T0 + timedelta(days=30)
    budget.start_cycle()
    budget.start_cycle()
    assert not budget.can_act()

    budget.start_cycle()
    assert budget.can_act()
    assert budget.count == 0


def test_start_cycle_refreshes_time_based_modes():
    clock = FakeClock()
    budget = OperationBudget(limit=1, clock=clock)
    budget.record_operation()

    clock.now = T0 + timedelta(days=1)
    budget.start_cycle()
    assert budget.count == 0
