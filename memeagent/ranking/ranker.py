import re
from typing import Iterable, List, Optional

from loguru import logger

from ..constants import DEFAULT_DENY_LIST
from ..models import Candidate, Post
from ..sentiment import LexiconSentimentScorer

SYMBOL_PATTERN = re.compile(r"\$([A-Z]+)")


def extract_symbol(text: str) -> Optional[str]:
    """Return the first `$TICKER` symbol in text without its sigil, if any."""
    match = SYMBOL_PATTERN.search(text or "")
    return match.group(1) if match else None


class CandidateRanker:
    """Turns raw posts into candidates sorted by sentiment.

    A post is skipped when its sentiment is unusable or negative, when it
    mentions a deny-listed term (case-insensitive), or when it carries no
    `$TICKER` symbol. Ties keep the feed order.
    """

    def __init__(
        self,
        scorer: Optional[LexiconSentimentScorer] = None,
        deny_list: Optional[Iterable[str]] = None,
    ) -> None:
        self._scorer = scorer or LexiconSentimentScorer()
        terms = deny_list if deny_list is not None else DEFAULT_DENY_LIST
        self._deny_list = tuple(t.lower() for t in terms if t)

    def is_denied(self, text: str) -> bool:
        lowered = text.lower()
        return any(term in lowered for term in self._deny_list)

    def rank(self, posts: Iterable[Post]) -> List[Candidate]:
        candidates: List[Candidate] = []
        for post in posts:
            result = self._scorer.score(post.text)
            if not result.usable or result.score < 0 or self.is_denied(post.text):
                logger.warning("Skipping suspicious post: {}", post.text)
                continue

            symbol = extract_symbol(post.text)
            if symbol is None:
                continue

            candidates.append(
                Candidate(
                    symbol=symbol,
                    sentiment_score=result.score,
                    source_text=post.text,
                )
            )

        # sorted() is stable, so equal scores keep feed order
        return sorted(candidates, key=lambda c: c.sentiment_score, reverse=True)
