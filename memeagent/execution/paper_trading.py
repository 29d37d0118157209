from typing import List, Optional

from loguru import logger

from ..models import ExecutionResult, ExecutionStatus, TradeSide
from .interfaces import ExecutionVenue


class PaperExecutionVenue(ExecutionVenue):
    """Simulated venue: every submission settles immediately.

    Submissions are kept in `executed` for inspection.
    """

    def __init__(self) -> None:
        self.executed: List[ExecutionResult] = []

    async def _fill(
        self, symbol: str, side: TradeSide, size: Optional[float]
    ) -> ExecutionResult:
        result = ExecutionResult(
            symbol=symbol,
            side=side,
            status=ExecutionStatus.FILLED,
            size_in_base_units=size,
        )
        self.executed.append(result)
        logger.info("[paper] {} {} ({} SOL)", side.value, symbol, size)
        return result

    async def submit_buy(
        self, symbol: str, size_in_base_units: float
    ) -> ExecutionResult:
        return await self._fill(symbol, TradeSide.BUY, float(size_in_base_units))

    async def submit_sell(
        self, symbol: str, size_in_base_units: Optional[float] = None
    ) -> ExecutionResult:
        return await self._fill(symbol, TradeSide.SELL, size_in_base_units)
