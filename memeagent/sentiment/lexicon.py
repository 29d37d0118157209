"""Valence lexicon: nltk's VADER word list plus a crypto slang overlay.

VADER valences run from -4 to +4; the slang entries use the same scale and
take precedence over VADER where both define a word.
"""

from functools import lru_cache
from typing import Dict, FrozenSet

import nltk
from nltk.sentiment import SentimentIntensityAnalyzer
from nltk.sentiment.vader import VaderConstants

CRYPTO_SLANG: Dict[str, float] = {
    # positive
    "ath": 2.0,
    "bullish": 2.5,
    "diamond": 1.5,
    "gem": 2.0,
    "hodl": 1.0,
    "lambo": 2.0,
    "moon": 2.5,
    "mooning": 2.5,
    "pump": 1.5,
    "pumping": 1.5,
    "rocket": 2.0,
    "wagmi": 2.0,
    # negative
    "bearish": -2.5,
    "dump": -2.0,
    "dumping": -2.0,
    "fud": -1.5,
    "honeypot": -3.0,
    "ngmi": -2.0,
    "rekt": -2.5,
    "rug": -3.0,
    "rugged": -3.0,
    "rugpull": -3.5,
    "scam": -3.0,
    "scammer": -3.0,
}

# tokens are matched after apostrophes are stripped, so "don't" -> "dont"
NEGATIONS: FrozenSet[str] = frozenset(
    {word.replace("'", "") for word in VaderConstants.NEGATE} | {"no"}
)


def ensure_vader() -> None:
    try:
        nltk.data.find("sentiment/vader_lexicon.zip")
    except LookupError:
        nltk.download("vader_lexicon", quiet=True)


@lru_cache()
def default_lexicon() -> Dict[str, float]:
    """VADER's lexicon with CRYPTO_SLANG layered on top, loaded once."""
    ensure_vader()
    lexicon = {
        word.lower(): float(valence)
        for word, valence in SentimentIntensityAnalyzer().lexicon.items()
    }
    lexicon.update(CRYPTO_SLANG)
    return lexicon
