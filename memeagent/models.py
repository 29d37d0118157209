from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import TARGET_MULTIPLIER_CEILING, TARGET_MULTIPLIER_FLOOR


class TradingMode(str, Enum):
    """Where buy/sell instructions are sent."""

    PAPER = "paper"
    LIVE = "live"


class BudgetResetMode(str, Enum):
    """Trigger used to open a new operation budget window."""

    ROLLING = "rolling"
    MIDNIGHT = "midnight"
    CYCLES = "cycles"


class TradeSide(str, Enum):
    """Side for a swap submitted to the venue."""

    BUY = "BUY"
    SELL = "SELL"


# =========================
# Inputs: posts, sentiment, candidates
# =========================


class Post(BaseModel):
    """One social post returned by the feed."""

    text: str = Field(..., description="Raw post text")
    post_id: Optional[str] = Field(default=None, description="Feed-side post id")
    author_id: Optional[str] = Field(default=None, description="Feed-side author id")


class SentimentResult(BaseModel):
    """Scalar sentiment for one text plus the tokens that produced it.

    `score` is None when the text has no usable tokens; callers must treat
    that as disqualifying.
    """

    score: Optional[float] = Field(default=None)
    tokens: List[str] = Field(default_factory=list)

    @property
    def usable(self) -> bool:
        return self.score is not None


class Candidate(BaseModel):
    """A ranked (symbol, sentiment) pair derived from one post."""

    symbol: str = Field(..., description="Uppercase symbol without the $ sigil")
    sentiment_score: float
    source_text: str

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return v.lstrip("$").upper()


# =========================
# Market data and admission
# =========================


class MarketSnapshot(BaseModel):
    """Price and market cap for a symbol, fetched per decision."""

    price: float = Field(..., ge=0, description="Price in USD")
    market_cap: float = Field(default=0.0, ge=0, description="Market cap in USD")
    token_address: Optional[str] = Field(
        default=None, description="On-chain mint address, when the source knows it"
    )


class GateStatus(str, Enum):
    """Outcome of the buy admission check."""

    ADMITTED = "admitted"
    REJECTED = "rejected"
    NO_DATA = "no_data"


class GateOutcome(BaseModel):
    """Admission decision for one symbol with the snapshot it was based on."""

    symbol: str
    status: GateStatus
    snapshot: Optional[MarketSnapshot] = Field(default=None)
    reason: Optional[str] = Field(default=None, description="Why it was not admitted")

    @property
    def admitted(self) -> bool:
        return self.status == GateStatus.ADMITTED


# =========================
# Positions and exits
# =========================


class Position(BaseModel):
    """An open holding awaiting its profit-multiplier exit."""

    symbol: str
    entry_price: float = Field(..., gt=0)
    target_multiplier: float = Field(
        ..., ge=TARGET_MULTIPLIER_FLOOR, le=TARGET_MULTIPLIER_CEILING
    )
    size_in_base_units: float = Field(..., gt=0, description="Size in SOL")
    opened_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def target_price(self) -> float:
        return self.entry_price * self.target_multiplier


class ExitAction(str, Enum):
    SELL = "sell"
    HOLD = "hold"


class ExitDecision(BaseModel):
    """Result of evaluating one position against a fresh snapshot."""

    symbol: str
    action: ExitAction
    price: Optional[float] = Field(default=None, description="Price used, if any")
    target_price: float
    reason: str = ""

    @property
    def should_sell(self) -> bool:
        return self.action == ExitAction.SELL


class BudgetSnapshot(BaseModel):
    """Read-only view of the operation budget for status reporting."""

    count: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    window_start: datetime

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)


# =========================
# Execution
# =========================


class ExecutionStatus(str, Enum):
    """Settlement status of a swap submitted to the venue."""

    FILLED = "filled"
    REJECTED = "rejected"
    ERROR = "error"


class ExecutionResult(BaseModel):
    """Result of submitting a buy or sell to the execution venue.

    Position state is only mutated when `ok` is True.
    """

    symbol: str
    side: TradeSide
    status: ExecutionStatus
    size_in_base_units: Optional[float] = Field(default=None)
    tx_signature: Optional[str] = Field(default=None, description="On-chain signature")
    reason: Optional[str] = Field(default=None, description="Message for rejects/errors")

    @property
    def ok(self) -> bool:
        return self.status == ExecutionStatus.FILLED


# =========================
# Cycle results
# =========================


class AcquisitionOutcome(str, Enum):
    """What Phase A of a cycle ended with."""

    BUDGET_EXHAUSTED = "budget_exhausted"
    NO_CANDIDATES = "no_candidates"
    NO_DATA = "no_data"
    REJECTED = "rejected"
    ALREADY_HELD = "already_held"
    BUY_FAILED = "buy_failed"
    BOUGHT = "bought"


class SellRecord(BaseModel):
    """A position closed by a confirmed sell."""

    symbol: str
    entry_price: float
    exit_price: float
    profit_pct: float
    tx_signature: Optional[str] = Field(default=None)


class CycleResult(BaseModel):
    """Summary of one decision cycle."""

    cycle_id: str
    started_at: datetime
    acquisition: AcquisitionOutcome
    candidate: Optional[Candidate] = Field(default=None)
    gate: Optional[GateOutcome] = Field(default=None)
    bought: Optional[Position] = Field(default=None)
    sold: List[SellRecord] = Field(default_factory=list)
    held: List[str] = Field(default_factory=list, description="Symbols evaluated and held")
    evicted: List[Position] = Field(default_factory=list)
    budget: BudgetSnapshot
