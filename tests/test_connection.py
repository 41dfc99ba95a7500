"""
浏览器连接管理器测试
"""
import pytest

from browser_debug_server import connection as connection_module
from browser_debug_server.connection import BrowserConnection
from conftest import FakeBrowser, FakeChromium, FakeContext, FakePage, FakePlaywright


@pytest.mark.asyncio
async def test_list_pages_flattens_contexts_in_order(browser, connection):
    a, b, c = FakePage("A", "http://a"), FakePage("B", "http://b"), FakePage("C", "http://c")
    browser.contexts = [FakeContext([a, b]), FakeContext([]), FakeContext([c])]

    pages = await connection.list_pages()

    assert pages == [a, b, c]


@pytest.mark.asyncio
async def test_connects_once_and_reuses_handle(chromium, connection):
    await connection.list_pages()
    await connection.list_pages()

    assert chromium.connect_calls == ["http://localhost:9222"]
    assert connection.connected


@pytest.mark.asyncio
async def test_topology_is_requeried_on_every_call(browser, connection):
    assert await connection.list_pages() == []

    page = FakePage()
    browser.contexts[0].pages.append(page)

    assert await connection.list_pages() == [page]


@pytest.mark.asyncio
async def test_connection_failure_degrades_to_empty_and_retries(chromium, connection, caplog):
    chromium.error = RuntimeError("connect ECONNREFUSED 127.0.0.1:9222")

    assert await connection.list_pages() == []
    assert await connection.list_pages() == []
    assert len(chromium.connect_calls) == 2
    assert not connection.connected
    assert "ECONNREFUSED" in caplog.text

    chromium.error = None
    page = FakePage()
    chromium.browser.contexts[0].pages.append(page)

    assert await connection.list_pages() == [page]
    assert len(chromium.connect_calls) == 3


@pytest.mark.asyncio
async def test_reconnects_after_browser_disconnect(browser, chromium, connection):
    await connection.list_pages()
    browser.disconnect()

    assert not connection.connected

    await connection.list_pages()
    assert len(chromium.connect_calls) == 2


@pytest.mark.asyncio
async def test_starts_playwright_lazily(monkeypatch):
    fake = FakePlaywright(FakeChromium(FakeBrowser([FakeContext([FakePage()])])))

    class Starter:
        started = 0

        async def start(self):
            Starter.started += 1
            return fake

    monkeypatch.setattr(connection_module, "async_playwright", Starter)

    conn = BrowserConnection("http://127.0.0.1:9333")
    pages = await conn.list_pages()
    await conn.list_pages()

    assert len(pages) == 1
    assert Starter.started == 1
    assert fake.chromium.connect_calls == ["http://127.0.0.1:9333"]

    await conn.stop()
    assert fake.stopped
    assert conn.playwright is None
    assert not conn.connected
