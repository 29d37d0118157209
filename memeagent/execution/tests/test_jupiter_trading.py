from types import SimpleNamespace

import httpx
import pytest
from solders.keypair import Keypair

from memeagent.constants import WRAPPED_SOL_MINT
from memeagent.execution.jupiter_trading import JupiterExecutionVenue
from memeagent.models import ExecutionStatus, TradeSide


class FakeRpc:
    def __init__(self) -> None:
        self.closed = False

    async def close(self):
        self.closed = True


def _venue(handler=None, mints=None, **kwargs):
    resolved = []
    mints = {"FOO": "FooMint111"} if mints is None else mints

    async def resolver(symbol):
        resolved.append(symbol)
        return mints.get(symbol)

    transport = httpx.MockTransport(handler) if handler else None
    venue = JupiterExecutionVenue(
        rpc_client=FakeRpc(),
        keypair=Keypair(),
        mint_resolver=resolver,
        transport=transport,
        **kwargs,
    )
    return venue, resolved


@pytest.mark.asyncio
async def test_unresolvable_mint_is_rejected():
    venue, _ = _venue(mints={})

    result = await venue.submit_buy("FOO", 0.1)

    assert result.status == ExecutionStatus.REJECTED
    assert result.reason == "Cannot resolve token mint for FOO"
    assert not result.ok


@pytest.mark.asyncio
async def test_missing_route_is_rejected():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"error": "no route"})

    venue, _ = _venue(handler=handler, slippage_bps=250)
    result = await venue.submit_buy("FOO", 0.1)

    assert result.status == ExecutionStatus.REJECTED
    assert "No Jupiter route" in result.reason
    assert seen["inputMint"] == WRAPPED_SOL_MINT
    assert seen["outputMint"] == "FooMint111"
    assert seen["amount"] == "100000000"
    assert seen["slippageBps"] == "250"


@pytest.mark.asyncio
async def test_quote_http_error_is_rejected():
    venue, _ = _venue(handler=lambda request: httpx.Response(500))

    result = await venue.submit_buy("FOO", 0.1)

    assert result.status == ExecutionStatus.REJECTED


@pytest.mark.asyncio
async def test_confirmed_swaps_are_filled(monkeypatch):
    quotes = []

    def handler(request: httpx.Request) -> httpx.Response:
        quotes.append(dict(request.url.params))
        return httpx.Response(200, json={"outAmount": "12345"})

    venue, resolved = _venue(handler=handler)

    async def fake_build_swap(quote):
        return SimpleNamespace(quote=quote)

    async def fake_send_and_confirm(unsigned):
        return f"sig-{len(quotes)}"

    async def fake_balance(mint):
        return 777

    monkeypatch.setattr(venue, "_build_swap", fake_build_swap)
    monkeypatch.setattr(venue, "_send_and_confirm", fake_send_and_confirm)
    monkeypatch.setattr(venue, "_token_balance", fake_balance)

    buy = await venue.submit_buy("FOO", 0.1)
    sell = await venue.submit_sell("FOO", 0.1)

    assert buy.ok and buy.tx_signature == "sig-1"
    assert sell.ok and sell.side == TradeSide.SELL and sell.tx_signature == "sig-2"
    assert quotes[1]["inputMint"] == "FooMint111"
    assert quotes[1]["outputMint"] == WRAPPED_SOL_MINT
    assert quotes[1]["amount"] == "777"
    # the mint is resolved once and reused for the sell
    assert resolved == ["FOO"]


@pytest.mark.asyncio
async def test_sell_without_balance_is_rejected(monkeypatch):
    venue, _ = _venue()

    async def empty_balance(mint):
        return 0

    monkeypatch.setattr(venue, "_token_balance", empty_balance)

    result = await venue.submit_sell("FOO")

    assert result.status == ExecutionStatus.REJECTED
    assert result.reason == "No FOO balance to sell"


@pytest.mark.asyncio
async def test_unexpected_rpc_failure_is_error(monkeypatch):
    venue, _ = _venue()

    async def broken_balance(mint):
        raise RuntimeError("rpc unavailable")

    monkeypatch.setattr(venue, "_token_balance", broken_balance)

    result = await venue.submit_sell("FOO")

    assert result.status == ExecutionStatus.ERROR
    assert result.reason == "rpc unavailable"


@pytest.mark.asyncio
async def test_close_closes_rpc_client():
    venue, _ = _venue()

    await venue.close()

    assert venue._rpc.closed
