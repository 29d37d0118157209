"""Lexicon-based sentiment scoring for social posts."""

from .scorer import LexiconSentimentScorer

__all__ = ["LexiconSentimentScorer"]
