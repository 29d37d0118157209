"""Position tracking and the operation budget."""

from .budget import OperationBudget
from .tracker import PositionTracker, profit_pct

__all__ = ["OperationBudget", "PositionTracker", "profit_pct"]
