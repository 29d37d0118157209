from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import MarketSnapshot

# Contracts for market data sources (module-local abstract interfaces).


class MarketDataSource(ABC):
    """Looks up the latest price and market cap for a symbol.

    Implementations return None when the data is unavailable or malformed;
    they should not raise for ordinary network failures.
    """

    @abstractmethod
    async def lookup(self, symbol: str) -> Optional[MarketSnapshot]:
        """Return a fresh snapshot for `symbol` (uppercase, no sigil) or None."""
        raise NotImplementedError
