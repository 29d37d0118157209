"""Social post feeds."""

from .interfaces import SocialFeed
from .x_search import StaticFeed, XRecentSearchFeed

__all__ = ["SocialFeed", "StaticFeed", "XRecentSearchFeed"]
