from typing import Any, Dict, List, Mapping, Optional

import httpx
from loguru import logger

from ..constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, DEXSCREENER_SEARCH_URL
from ..models import MarketSnapshot
from .interfaces import MarketDataSource


def _pick_pair(pairs: List[Dict[str, Any]], symbol: str) -> Optional[Dict[str, Any]]:
    """Prefer the first pair whose base token symbol matches, else the first pair."""
    for pair in pairs:
        base = pair.get("baseToken") or {}
        if str(base.get("symbol", "")).upper() == symbol.upper():
            return pair
    return pairs[0] if pairs else None


def parse_pair(pair: Mapping[str, Any]) -> Optional[MarketSnapshot]:
    """Build a snapshot from one DexScreener pair payload.

    Example pair (trimmed):
    ```
    {
        "chainId": "solana",
        "baseToken": {"address": "7xKX...", "symbol": "FOO"},
        "priceUsd": "0.004812",
        "marketCap": 5120.5,
        "fdv": 5120.5
    }
    ```
    Returns None when the price is missing or cannot be parsed.
    """
    try:
        price = float(pair["priceUsd"])
        market_cap = float(pair.get("marketCap") or pair.get("fdv") or 0.0)
    except (KeyError, TypeError, ValueError):
        return None
    if price < 0 or market_cap < 0:
        return None
    base = pair.get("baseToken") or {}
    return MarketSnapshot(
        price=price,
        market_cap=market_cap,
        token_address=base.get("address"),
    )


class DexScreenerMarketDataSource(MarketDataSource):
    """Fetches snapshots from the public DexScreener search API.

    Only pairs on `chain_id` are considered. Any HTTP or payload error is
    logged and reported as None.
    """

    def __init__(
        self,
        chain_id: str = "solana",
        base_url: str = DEXSCREENER_SEARCH_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._chain_id = chain_id
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def _search_pairs(self, symbol: str) -> List[Dict[str, Any]]:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.get(self._base_url, params={"q": symbol})
            resp.raise_for_status()
            data = resp.json()
        pairs = data.get("pairs") or []
        return [p for p in pairs if p.get("chainId") == self._chain_id]

    async def lookup(self, symbol: str) -> Optional[MarketSnapshot]:
        try:
            pairs = await self._search_pairs(symbol)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error fetching data for {}: {}", symbol, exc)
            return None

        pair = _pick_pair(pairs, symbol)
        if pair is None:
            logger.info("No market pairs found for {}", symbol)
            return None

        snapshot = parse_pair(pair)
        if snapshot is None:
            logger.warning("Malformed market data for {}: {}", symbol, pair)
            return None

        logger.info(
            "Fetched data for {}: Price ${}, Market Cap ${}",
            symbol,
            snapshot.price,
            snapshot.market_cap,
        )
        return snapshot

    async def resolve_mint(self, symbol: str) -> Optional[str]:
        """Return the token mint address for a symbol, if DexScreener knows it."""
        snapshot = await self.lookup(symbol)
        return snapshot.token_address if snapshot else None


class StaticMarketDataSource(MarketDataSource):
    """In-memory source for tests and dry runs; unknown symbols yield None."""

    def __init__(self, snapshots: Optional[Dict[str, MarketSnapshot]] = None) -> None:
        self.snapshots: Dict[str, Optional[MarketSnapshot]] = {
            k.upper(): v for k, v in (snapshots or {}).items()
        }
        self.calls: List[str] = []

    def set(self, symbol: str, snapshot: Optional[MarketSnapshot]) -> None:
        self.snapshots[symbol.upper()] = snapshot

    async def lookup(self, symbol: str) -> Optional[MarketSnapshot]:
        self.calls.append(symbol)
        return self.snapshots.get(symbol.upper())
