from typing import List, Optional

import httpx
from loguru import logger

from ..constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, X_RECENT_SEARCH_URL
from ..models import Post
from .interfaces import SocialFeed


class XRecentSearchFeed(SocialFeed):
    """Recent-search client for the X (Twitter) v2 API using a bearer token."""

    def __init__(
        self,
        bearer_token: str,
        max_results: int = 50,
        base_url: str = X_RECENT_SEARCH_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._bearer_token = bearer_token
        # the API accepts 10..100
        self._max_results = min(max(int(max_results), 10), 100)
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def search(self, tag: str) -> List[Post]:
        headers = {"Authorization": f"Bearer {self._bearer_token}"}
        params = {
            "query": tag,
            "max_results": self._max_results,
            "tweet.fields": "author_id",
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.get(self._base_url, headers=headers, params=params)
            resp.raise_for_status()
            payload = resp.json()

        posts: List[Post] = []
        for item in payload.get("data") or []:
            text = item.get("text")
            if not text:
                continue
            posts.append(
                Post(text=text, post_id=item.get("id"), author_id=item.get("author_id"))
            )
        logger.info("Fetched {} posts for {}", len(posts), tag)
        return posts


class StaticFeed(SocialFeed):
    """Feed returning a fixed list of posts, for tests and dry runs."""

    def __init__(self, posts: Optional[List[Post]] = None) -> None:
        self.posts: List[Post] = list(posts or [])
        self.queries: List[str] = []

    async def search(self, tag: str) -> List[Post]:
        self.queries.append(tag)
        return list(self.posts)
