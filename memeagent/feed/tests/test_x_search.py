import httpx
import pytest

from memeagent.feed.x_search import StaticFeed, XRecentSearchFeed
from memeagent.models import Post


@pytest.mark.asyncio
async def test_search_sends_bearer_and_parses_posts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "data": [
                    {"id": "1", "text": "$FOO to the moon", "author_id": "42"},
                    {"id": "2", "text": ""},
                    {"id": "3", "text": "$BAR gem"},
                ],
                "meta": {"result_count": 3},
            },
        )

    feed = XRecentSearchFeed("token-123", transport=httpx.MockTransport(handler))
    posts = await feed.search("#memeCoin")

    assert seen["auth"] == "Bearer token-123"
    assert seen["params"]["query"] == "#memeCoin"
    assert seen["params"]["max_results"] == "50"
    assert posts == [
        Post(text="$FOO to the moon", post_id="1", author_id="42"),
        Post(text="$BAR gem", post_id="3"),
    ]


@pytest.mark.asyncio
async def test_search_without_results_is_empty():
    feed = XRecentSearchFeed(
        "t",
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json={"meta": {"result_count": 0}})
        ),
    )

    assert await feed.search("#memeCoin") == []


@pytest.mark.asyncio
async def test_search_raises_on_http_error():
    feed = XRecentSearchFeed(
        "t",
        transport=httpx.MockTransport(lambda request: httpx.Response(429)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await feed.search("#memeCoin")


@pytest.mark.parametrize("requested,expected", [(1, "10"), (500, "100"), (25, "25")])
@pytest.mark.asyncio
async def test_max_results_is_clamped(requested, expected):
    seen = {}

    def handler(request):
        seen["max_results"] = request.url.params["max_results"]
        return httpx.Response(200, json={"data": []})

    feed = XRecentSearchFeed(
        "t", max_results=requested, transport=httpx.MockTransport(handler)
    )
    await feed.search("#memeCoin")

    assert seen["max_results"] == expected


@pytest.mark.asyncio
async def test_static_feed():
    feed = StaticFeed([Post(text="$FOO gem")])

    assert [p.text for p in await feed.search("#memeCoin")] == ["$FOO gem"]
    assert feed.queries == ["#memeCoin"]
