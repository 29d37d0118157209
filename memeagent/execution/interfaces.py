from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import ExecutionResult

# Contracts for execution venues (module-local abstract interfaces).
# An implementation may submit real on-chain swaps or simulate them.


class ExecutionVenue(ABC):
    """Submits buys and sells and reports whether they settled.

    Implementations should not raise for ordinary failures; they return an
    ExecutionResult with status REJECTED/ERROR and a reason instead.
    """

    @abstractmethod
    async def submit_buy(
        self, symbol: str, size_in_base_units: float
    ) -> ExecutionResult:
        """Spend `size_in_base_units` SOL on `symbol`."""
        raise NotImplementedError

    @abstractmethod
    async def submit_sell(
        self, symbol: str, size_in_base_units: Optional[float] = None
    ) -> ExecutionResult:
        """Sell the whole holding of `symbol` back to SOL.

        `size_in_base_units` is the size recorded at entry and is informational
        for venues that can look up the actual token balance.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources (optional)."""
        return None
