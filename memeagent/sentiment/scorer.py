from typing import Dict, Iterable, List, Mapping, Optional

from nltk.stem.porter import PorterStemmer
from nltk.tokenize import RegexpTokenizer

from ..models import SentimentResult
from .lexicon import NEGATIONS, default_lexicon


class LexiconSentimentScorer:
    """Scores text as the mean lexicon valence over its word tokens.

    A token is looked up as written first and then by its Porter stem, so
    inflections missing from the lexicon still share a valence ("gaining"
    and "gain"). A negation word flips the sign of the next scored token.
    The result is deterministic for a given input.
    """

    def __init__(
        self,
        lexicon: Optional[Mapping[str, float]] = None,
        negations: Optional[Iterable[str]] = None,
    ) -> None:
        self._stemmer = PorterStemmer()
        self._tokenizer = RegexpTokenizer(r"[A-Za-z0-9_]+")
        self._negations = frozenset(negations if negations is not None else NEGATIONS)
        source = lexicon if lexicon is not None else default_lexicon()
        self._vocabulary: Dict[str, float] = {
            word.lower(): float(valence) for word, valence in source.items()
        }
        # first entry wins when several words share a stem
        self._stems: Dict[str, float] = {}
        for word, valence in self._vocabulary.items():
            self._stems.setdefault(self._stem(word), valence)

    def _stem(self, word: str) -> str:
        return self._stemmer.stem(word.lower())

    def valence(self, token: str) -> Optional[float]:
        valence = self._vocabulary.get(token)
        if valence is None:
            valence = self._stems.get(self._stem(token))
        return valence

    def tokenize(self, text: str) -> List[str]:
        # apostrophes are dropped first so "don't" becomes a single negation token
        return [t.lower() for t in self._tokenizer.tokenize(text.replace("'", ""))]

    def score(self, text: str) -> SentimentResult:
        tokens = self.tokenize(text or "")
        if not tokens:
            return SentimentResult(score=None, tokens=[])

        total = 0.0
        negate = False
        for token in tokens:
            if token in self._negations:
                negate = True
                continue
            valence = self.valence(token)
            if valence is None:
                continue
            total += -valence if negate else valence
            negate = False

        return SentimentResult(score=total / len(tokens), tokens=tokens)
