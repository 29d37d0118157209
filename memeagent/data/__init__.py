"""Market data sources and the buy admission gate."""

from .gate import AdmissionBands, MarketDataGate
from .interfaces import MarketDataSource
from .market import DexScreenerMarketDataSource, StaticMarketDataSource

__all__ = [
    "AdmissionBands",
    "MarketDataGate",
    "MarketDataSource",
    "DexScreenerMarketDataSource",
    "StaticMarketDataSource",
]
