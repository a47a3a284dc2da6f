import asyncio
import time

import httpx
import pytest

from tools.web.link_fetcher import LinkedContentFetcher

pytestmark = pytest.mark.unit

LONG_OFFER = "Harbor View group offer. " + "Group rate $189 per night for 20 rooms over 3 nights. " * 4

OFFER_PAGE = f"""<html><body>
<nav>Home | Rooms | Dining</nav>
<main><h1>Group Offer</h1><p>{LONG_OFFER}</p></main>
<footer>Copyright Harbor View</footer>
</body></html>"""


def _fetcher(handler, **kwargs) -> LinkedContentFetcher:
    return LinkedContentFetcher(transport=httpx.MockTransport(handler), **kwargs)


def _html(text: str, status: int = 200) -> httpx.Response:
    return httpx.Response(status, headers={"content-type": "text/html; charset=utf-8"}, text=text)


def test_fetch_html_strips_boilerplate():
    results = asyncio.run(_fetcher(lambda request: _html(OFFER_PAGE)).fetch_all(["https://hotel.example/offer"]))

    assert len(results) == 1
    result = results[0]
    assert result.succeeded is True
    assert result.error_message is None
    assert "Group rate $189" in result.text
    assert "Home | Rooms" not in result.text
    assert "Copyright" not in result.text


def test_sends_browser_headers():
    seen = {}

    def handler(request):
        seen["user_agent"] = request.headers.get("user-agent", "")
        return _html(OFFER_PAGE)

    asyncio.run(_fetcher(handler).fetch_all(["https://hotel.example/offer"]))
    assert seen["user_agent"].startswith("Mozilla/5.0")


def test_non_text_content_is_skipped():
    def handler(request):
        return httpx.Response(200, headers={"content-type": "application/json"}, json={"rate": 189})

    result = asyncio.run(_fetcher(handler).fetch_all(["https://api.example/rates"]))[0]
    assert result.succeeded is False
    assert result.text == ""
    assert result.error_message.startswith("Skipped non-text content")


def test_short_content_is_rejected():
    result = asyncio.run(_fetcher(lambda request: _html("<p>Too short</p>")).fetch_all(["https://a.example"]))[0]
    assert result.succeeded is False
    assert result.error_message == "Content too short"


def test_http_error_status():
    result = asyncio.run(_fetcher(lambda request: _html("gone", status=404)).fetch_all(["https://a.example/x"]))[0]
    assert result.succeeded is False
    assert result.error_message == "HTTP 404 Not Found"


def test_oversized_body_is_rejected():
    def handler(request):
        return httpx.Response(200, headers={"content-type": "text/plain"}, content=b"x" * 500)

    result = asyncio.run(_fetcher(handler, max_bytes=100).fetch_all(["https://a.example/big"]))[0]
    assert result.succeeded is False
    assert result.error_message.startswith("Content too large")


def test_transport_timeout_is_reported():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    result = asyncio.run(_fetcher(handler).fetch_all(["https://slow.example"]))[0]
    assert result.succeeded is False
    assert result.error_message == "Request timeout after 15s"


def test_hard_timeout_bounds_slow_links():
    async def handler(request):
        await asyncio.sleep(5)
        return _html(OFFER_PAGE)

    result = asyncio.run(_fetcher(handler, timeout_s=0.05).fetch_all(["https://slow.example"]))[0]
    assert result.succeeded is False
    assert result.error_message == "Request timeout after 0.05s"


def test_connection_error_is_reported():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(_fetcher(handler).fetch_all(["https://down.example"]))[0]
    assert result.succeeded is False
    assert result.error_message.startswith("Failed to fetch")


def test_results_keep_input_order_and_isolate_failures():
    async def handler(request):
        host = request.url.host
        if host == "first.example":
            await asyncio.sleep(0.05)
            return _html(OFFER_PAGE)
        if host == "broken.example":
            raise httpx.ConnectError("boom", request=request)
        return httpx.Response(200, headers={"content-type": "text/plain"}, text=LONG_OFFER)

    urls = ["https://first.example", "https://broken.example", "https://third.example"]
    results = asyncio.run(_fetcher(handler).fetch_all(urls))

    assert [r.url for r in results] == urls
    assert [r.succeeded for r in results] == [True, False, True]


def test_only_first_max_links_are_fetched():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return _html(OFFER_PAGE)

    urls = [f"https://hotel.example/page{i}" for i in range(8)]
    results = asyncio.run(_fetcher(handler).fetch_all(urls))

    assert len(results) == 5
    assert sorted(requested) == sorted(urls[:5])


def test_no_urls_makes_no_requests():
    def handler(request):
        raise AssertionError("no request expected")

    assert asyncio.run(_fetcher(handler).fetch_all([])) == []


def test_redirects_are_followed():
    requested = []

    def handler(request):
        requested.append(request.url.path)
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://hotel.example/new"})
        return httpx.Response(200, headers={"content-type": "text/plain"}, text=LONG_OFFER)

    result = asyncio.run(_fetcher(handler).fetch_all(["https://hotel.example/old"]))[0]

    assert result.succeeded is True
    assert result.error_message is None
    assert result.url == "https://hotel.example/old"
    assert "Group rate $189" in result.text
    assert requested == ["/old", "/new"]


def test_links_are_fetched_concurrently():
    async def handler(request):
        await asyncio.sleep(0.2)
        return _html(OFFER_PAGE)

    urls = [f"https://hotel.example/page{i}" for i in range(5)]
    start = time.perf_counter()
    results = asyncio.run(_fetcher(handler).fetch_all(urls))
    elapsed = time.perf_counter() - start

    assert all(r.succeeded for r in results)
    assert elapsed < 0.6
