# File: tests/test_client.py
# Transport tests against local aiohttp servers
from __future__ import annotations

import time
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web
from conftest import serve_app

from page_scout.config import ClientConfig
from page_scout.errors import AssetFetchError, TransportFailure
from page_scout.navigation.session import NavigationSession
from page_scout.transport.client import BrowserClient
from page_scout.transport.fetcher import AssetFetcher
from page_scout.transport.models import Link


# --------------------------------------------------------------------------- #
#                            Test-server fixtures                             #
# --------------------------------------------------------------------------- #


def _redirect(status: int, location: str):
    async def handler(_):
        return web.Response(status=status, headers={"Location": location})

    return handler


def _html(text: str, status: int = 200, headers: dict | None = None, reason: str | None = None):
    async def handler(_):
        return web.Response(
            text=text, status=status, reason=reason, content_type="text/html", headers=headers
        )

    return handler


@pytest_asyncio.fixture
async def test_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_form(request: web.Request):
        return web.Response(text=f"<p>{request.method}</p>", content_type="text/html")

    async def handle_user_agent(request: web.Request):
        return web.Response(text=request.headers.get("User-Agent", ""), content_type="text/plain")

    async def handle_png(_):
        return web.Response(body=b"\x89PNG\r\n", content_type="image/png")

    app.router.add_get(
        "/",
        _html('<title>Home</title><a href="/moved">Moved</a><a href="/later">Later</a>'),
    )
    app.router.add_get("/final", _html("<title>Final</title>"))
    app.router.add_get("/moved", _redirect(301, "/final"))
    app.router.add_get("/moved-308", _redirect(308, "/final"))
    app.router.add_get("/later", _redirect(302, "/final"))
    app.router.add_get("/temp-307", _redirect(307, "/final"))
    app.router.add_get("/chain-perm-temp", _redirect(301, "/later"))
    app.router.add_get("/chain-temp-perm", _redirect(302, "/moved"))
    app.router.add_get("/loop", _redirect(302, "/loop"))
    app.router.add_get("/bad-location", _redirect(301, "http://[broken"))
    app.router.add_post("/submit", _redirect(303, "/form"))
    app.router.add_get("/form", handle_form)
    app.router.add_post("/form", handle_form)
    app.router.add_get("/busy", _html("busy", 429, {"Retry-After": "120"}))
    app.router.add_get("/busy-odd", _html("busy", 429, {"Retry-After": "²"}))
    app.router.add_get("/quota", _html("quota", 509, reason="Bandwidth Limit Exceeded"))
    app.router.add_get("/gone", _html("gone", 410))
    app.router.add_get("/ua", handle_user_agent)
    app.router.add_get("/img/logo.png", handle_png)

    async for url in serve_app(app, unused_tcp_port):
        yield url


# --------------------------------------------------------------------------- #
#                                BrowserClient                                #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_plain_request(basic_config, test_server: str):
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("GET", f"{test_server}/")

    assert exchange.status_code == 200
    assert exchange.final_url == f"{test_server}/"
    assert "<title>Home</title>" in exchange.content
    assert exchange.uses_temporary_redirect is False
    assert exchange.permanent_redirect_url == ""
    assert exchange.retry_at == 0
    assert client.last_status_code == 200


@pytest.mark.parametrize("path", ["/moved", "/moved-308"])
@pytest.mark.asyncio()
async def test_permanent_redirect_is_recorded(basic_config, test_server: str, path: str):
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("GET", f"{test_server}{path}")

    assert exchange.status_code == 200
    assert exchange.final_url == f"{test_server}/final"
    assert exchange.permanent_redirect_url == f"{test_server}/final"
    assert exchange.uses_temporary_redirect is False


@pytest.mark.parametrize("path", ["/later", "/temp-307"])
@pytest.mark.asyncio()
async def test_temporary_redirect_is_recorded(basic_config, test_server: str, path: str):
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("GET", f"{test_server}{path}")

    assert exchange.final_url == f"{test_server}/final"
    assert exchange.uses_temporary_redirect is True
    assert exchange.permanent_redirect_url == ""


@pytest.mark.asyncio()
async def test_permanent_then_temporary_chain(basic_config, test_server: str):
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("GET", f"{test_server}/chain-perm-temp")

    assert exchange.uses_temporary_redirect is True
    assert exchange.permanent_redirect_url == f"{test_server}/later"


@pytest.mark.asyncio()
async def test_temporary_then_permanent_chain(basic_config, test_server: str):
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("GET", f"{test_server}/chain-temp-perm")

    assert exchange.uses_temporary_redirect is True
    assert exchange.permanent_redirect_url == ""


@pytest.mark.asyncio()
async def test_start_exchange_resets_redirect_state(basic_config, test_server: str):
    async with BrowserClient(basic_config) as client:
        await client.request("GET", f"{test_server}/later")
        client.start_exchange()
        exchange = await client.request("GET", f"{test_server}/")

    assert exchange.uses_temporary_redirect is False


@pytest.mark.asyncio()
async def test_see_other_switches_to_get(basic_config, test_server: str):
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("POST", f"{test_server}/submit")

    assert exchange.status_code == 200
    assert "<p>GET</p>" in exchange.content
    assert exchange.uses_temporary_redirect is True


@pytest.mark.asyncio()
async def test_redirect_loop_is_a_transport_failure(test_server: str):
    config = ClientConfig(timeout=2.0, max_redirects=3)
    async with BrowserClient(config) as client:
        with pytest.raises(TransportFailure):
            await client.request("GET", f"{test_server}/loop")


@pytest.mark.asyncio()
async def test_malformed_location_is_a_transport_failure(basic_config, test_server: str):
    async with NavigationSession(basic_config) as session:
        with pytest.raises(TransportFailure) as excinfo:
            await session.navigate(f"{test_server}/bad-location")
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert session.document is None


@pytest.mark.asyncio()
async def test_non_ascii_retry_after_is_ignored(basic_config, test_server: str):
    async with NavigationSession(basic_config) as session:
        await session.navigate(f"{test_server}/busy-odd")
        assert session.status_code() == 429
        assert session.retry_at() == 0


@pytest.mark.asyncio()
async def test_retry_after_header(basic_config, test_server: str):
    before = int(time.time())
    async with BrowserClient(basic_config) as client:
        exchange = await client.request("GET", f"{test_server}/busy")

    assert exchange.status_code == 429
    assert before + 120 <= exchange.retry_at <= int(time.time()) + 120


@pytest.mark.asyncio()
async def test_user_agent_is_sent(test_server: str):
    config = ClientConfig(user_agent="Scout/2.0", timeout=2.0)
    async with BrowserClient(config) as client:
        exchange = await client.click(Link(url=f"{test_server}/ua"))
    assert exchange.content == "Scout/2.0"


@pytest.mark.asyncio()
async def test_connection_refused(basic_config, unused_tcp_port: int):
    async with BrowserClient(basic_config) as client:
        with pytest.raises(TransportFailure) as excinfo:
            await client.request("GET", f"http://localhost:{unused_tcp_port}/")
    assert excinfo.value.url == f"http://localhost:{unused_tcp_port}/"
    assert client.last_status_code is None


@pytest.mark.asyncio()
async def test_request_without_open_session():
    client = BrowserClient()
    with pytest.raises(RuntimeError):
        await client.request("GET", "http://localhost/")


# --------------------------------------------------------------------------- #
#                                 AssetFetcher                                #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_asset_fetcher_returns_bytes(basic_config, test_server: str):
    async with AssetFetcher(basic_config) as fetcher:
        body = await fetcher.fetch("GET", f"{test_server}/img/logo.png")
    assert body == b"\x89PNG\r\n"


@pytest.mark.asyncio()
async def test_asset_fetcher_rejects_error_status(basic_config, test_server: str):
    async with AssetFetcher(basic_config) as fetcher:
        with pytest.raises(AssetFetchError) as excinfo:
            await fetcher.fetch("GET", f"{test_server}/gone")
    assert excinfo.value.status == 410


# --------------------------------------------------------------------------- #
#                           Session over real transport                        #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_session_end_to_end(basic_config, test_server: str):
    async with NavigationSession(basic_config) as session:
        await session.navigate(f"{test_server}/")
        assert session.is_success()
        assert session.document.title == "Home"

        await session.click_link("Moved")
        assert session.document.title == "Final"
        assert session.permanent_redirect_url() == f"{test_server}/final"
        assert session.uses_temporary_redirect() is False

        body = await session.fetch_asset("/img/logo.png")
        assert body == b"\x89PNG\r\n"
        assert session.document.title == "Final"

        await session.navigate(f"{test_server}/later")
        assert session.uses_temporary_redirect() is True
        assert session.permanent_redirect_url() == ""
        assert session.is_temporary_result()


@pytest.mark.asyncio()
async def test_session_classifies_server_answers(basic_config, test_server: str):
    async with NavigationSession(basic_config) as session:
        await session.navigate(f"{test_server}/gone")
        assert session.is_gone() and session.is_permanent_error()

        await session.navigate(f"{test_server}/busy")
        assert session.is_temporary_result()
        assert session.retry_at() > int(time.time())

        await session.navigate(f"{test_server}/quota")
        assert session.status_code() == 509
        assert session.retry_at() > int(time.time())


@pytest.mark.asyncio()
async def test_session_closes_owned_clients(basic_config):
    session = NavigationSession(basic_config)
    async with session:
        client = session.transport
        assert isinstance(client, BrowserClient)
        assert client.session is not None
    assert client.session is None
