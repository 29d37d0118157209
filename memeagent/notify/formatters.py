"""Plain-text message builders for the notification channel and /status."""

from ..models import BudgetSnapshot, Candidate, ExecutionResult, GateOutcome, Position


def _fmt(value: float) -> str:
    return f"{value:g}"


def limit_reached(budget: BudgetSnapshot) -> str:
    return f"Daily operation limit reached ({budget.count}/{budget.limit})."


def no_candidates() -> str:
    return "No promising meme coins found."


def candidate_report(candidate: Candidate, gate: GateOutcome) -> str:
    lines = [
        f"Top Meme Coin: ${candidate.symbol}",
        f"Sentiment: {candidate.sentiment_score:.4f}",
    ]
    if gate.snapshot is not None:
        lines.append(f"Price: ${_fmt(gate.snapshot.price)}")
        lines.append(f"Market Cap: ${_fmt(gate.snapshot.market_cap)}")
    else:
        lines.append("Price: n/a")
        lines.append("Market Cap: n/a")
    lines.append(f"Tweet: {candidate.source_text}")
    if gate.reason:
        lines.append(gate.reason)
    return "\n".join(lines)


def buying(symbol: str, size: float, price: float) -> str:
    return f"Buying {_fmt(size)} SOL worth of {symbol} at ${_fmt(price)}..."


def bought(position: Position, result: ExecutionResult) -> str:
    text = (
        f"Bought {_fmt(position.size_in_base_units)} SOL worth of {position.symbol} "
        f"at ${_fmt(position.entry_price)}. Target: "
        f"${_fmt(position.target_price)} (x{_fmt(position.target_multiplier)})"
    )
    if result.tx_signature:
        text += f"\nTx: {result.tx_signature}"
    return text


def trade_failed(verb: str, symbol: str, result: ExecutionResult) -> str:
    reason = result.reason or result.status.value
    return f"Error {verb} {symbol}: {reason}"


def selling(symbol: str, price: float, entry_price: float, profit: float) -> str:
    return (
        f"Selling {symbol} at ${_fmt(price)} (Bought at ${_fmt(entry_price)})! "
        f"Profit: {profit:.2f}%"
    )


def evicted(position: Position, max_hold_hours: float) -> str:
    return (
        f"Stopped tracking {position.symbol}: target "
        f"${_fmt(position.target_price)} not reached within {_fmt(max_hold_hours)}h."
    )


def status(budget: BudgetSnapshot, tracked: int) -> str:
    return f"Daily Operations: {budget.count}/{budget.limit}\nTracked Coins: {tracked}"


WELCOME = "Welcome to Meme Coin Bot!"
ERROR_REPLY = "An error occurred. Please try again later."
