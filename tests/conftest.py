"""
测试用的 Playwright 替身对象
"""
from collections import defaultdict
from typing import Dict, List, Optional

import pytest
import pytest_asyncio

from browser_debug_server.connection import BrowserConnection
from browser_debug_server.session import BrowserDebugSession


class FakeConsoleMessage:
    def __init__(self, type: str, text: str):
        self.type = type
        self.text = text


class FakePage:
    """模拟 playwright Page：可改标题、可触发 console / close 事件"""

    def __init__(self, title: str = "Example", url: str = "http://example.com"):
        self.current_title = title
        self.current_url = url
        self.title_error: Optional[Exception] = None
        self.url_error: Optional[Exception] = None
        self.listeners: Dict[str, List] = defaultdict(list)

    @property
    def url(self) -> str:
        if self.url_error is not None:
            raise self.url_error
        return self.current_url

    async def title(self) -> str:
        if self.title_error is not None:
            raise self.title_error
        return self.current_title

    def on(self, event, handler):
        self.listeners[event].append(handler)

    def emit_console(self, type: str, text: str):
        for handler in list(self.listeners["console"]):
            handler(FakeConsoleMessage(type, text))

    def close(self):
        for handler in list(self.listeners["close"]):
            handler(self)


class FakeContext:
    def __init__(self, pages=None):
        self.pages = list(pages or [])


class FakeBrowser:
    def __init__(self, contexts=None):
        self.contexts = list(contexts or [])
        self.listeners: Dict[str, List] = defaultdict(list)

    def on(self, event, handler):
        self.listeners[event].append(handler)

    def disconnect(self):
        for handler in list(self.listeners["disconnected"]):
            handler(self)


class FakeChromium:
    def __init__(self, browser: Optional[FakeBrowser] = None, error: Optional[Exception] = None):
        self.browser = browser
        self.error = error
        self.connect_calls: List[str] = []

    async def connect_over_cdp(self, endpoint_url: str):
        self.connect_calls.append(endpoint_url)
        if self.error is not None:
            raise self.error
        return self.browser


class FakePlaywright:
    def __init__(self, chromium: FakeChromium):
        self.chromium = chromium
        self.stopped = False

    async def stop(self):
        self.stopped = True


@pytest.fixture
def browser():
    return FakeBrowser([FakeContext()])


@pytest.fixture
def chromium(browser):
    return FakeChromium(browser)


@pytest.fixture
def connection(chromium):
    conn = BrowserConnection("http://localhost:9222")
    conn.playwright = FakePlaywright(chromium)
    return conn


@pytest_asyncio.fixture
async def session(connection):
    debug_session = BrowserDebugSession(connection)
    yield debug_session
    await debug_session.stop()


@pytest.fixture
def registry(session):
    return session.registry


def add_pages(browser: FakeBrowser, *pages: FakePage, context: int = 0) -> List[FakePage]:
    """向指定上下文追加页面"""
    while len(browser.contexts) <= context:
        browser.contexts.append(FakeContext())
    browser.contexts[context].pages.extend(pages)
    return list(pages)
