import pytest

from memeagent.execution.paper_trading import PaperExecutionVenue
from memeagent.models import ExecutionStatus, TradeSide


@pytest.mark.asyncio
async def test_paper_venue_fills_everything():
    venue = PaperExecutionVenue()

    buy = await venue.submit_buy("FOO", 0.1)
    sell = await venue.submit_sell("FOO")

    assert buy.ok and buy.side == TradeSide.BUY
    assert buy.size_in_base_units == 0.1
    assert sell.status == ExecutionStatus.FILLED
    assert sell.side == TradeSide.SELL
    assert [r.symbol for r in venue.executed] == ["FOO", "FOO"]
    await venue.close()
