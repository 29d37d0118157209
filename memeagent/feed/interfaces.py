from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..models import Post

# Contracts for social post sources (module-local abstract interfaces).


class SocialFeed(ABC):
    """Returns recent posts matching a search tag, newest first."""

    @abstractmethod
    async def search(self, tag: str) -> List[Post]:
        """Return posts for `tag`; may be empty. May raise on transport errors."""
        raise NotImplementedError
