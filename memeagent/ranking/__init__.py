"""Candidate ranking over scored social posts."""

from .ranker import SYMBOL_PATTERN, CandidateRanker, extract_symbol

__all__ = ["CandidateRanker", "SYMBOL_PATTERN", "extract_symbol"]
