"""Execution venues for buy/sell swaps."""

from .factory import create_execution_venue
from .interfaces import ExecutionVenue
from .jupiter_trading import JupiterExecutionVenue
from .paper_trading import PaperExecutionVenue
from .wallet import load_keypair

__all__ = [
    "ExecutionVenue",
    "PaperExecutionVenue",
    "JupiterExecutionVenue",
    "create_execution_venue",
    "load_keypair",
]
