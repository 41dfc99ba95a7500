"""
浏览器连接管理器
通过 CDP 连接到已运行的浏览器，并按需枚举所有标签页
"""
import logging
from typing import List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

from .config import CDP_ENDPOINT_URL

logger = logging.getLogger(__name__)


class BrowserConnection:
    """远程浏览器连接（延迟建立，失败时降级为空结果）"""

    def __init__(self, cdp_url: str = CDP_ENDPOINT_URL):
        self.cdp_url = cdp_url
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None

    @property
    def connected(self) -> bool:
        return self.browser is not None

    async def connect(self) -> Optional[Browser]:
        """
        确保已连接到浏览器

        连接失败不会抛出异常，只记录日志并返回 None；
        失败不会被缓存，下次调用会重新尝试连接。

        Returns:
            已连接的 Browser，未连接时返回 None
        """
        if self.browser is not None:
            return self.browser

        try:
            if self.playwright is None:
                self.playwright = await async_playwright().start()
            browser = await self.playwright.chromium.connect_over_cdp(self.cdp_url)
        except Exception as e:
            logger.error(f"连接浏览器失败 ({self.cdp_url}): {e}")
            return None

        browser.on("disconnected", self._handle_disconnected)
        self.browser = browser
        logger.info(f"已连接到浏览器: {self.cdp_url}")
        return browser

    def _handle_disconnected(self, browser: Browser):
        """浏览器断开后清除句柄，下次枚举时重新连接"""
        if browser is self.browser:
            logger.warning(f"浏览器连接已断开: {self.cdp_url}")
            self.browser = None

    async def list_pages(self) -> List[Page]:
        """
        枚举所有浏览上下文中的页面

        顺序为（上下文顺序，上下文内页面顺序），该顺序决定对外的标签页编号。
        每次调用都重新查询浏览器，不缓存拓扑。
        """
        browser = await self.connect()
        if browser is None:
            return []

        pages: List[Page] = []
        for context in browser.contexts:
            pages.extend(context.pages)
        return pages

    async def stop(self):
        """停止 Playwright 驱动（仅在进程退出时调用，不关闭外部浏览器）"""
        self.browser = None
        if self.playwright is not None:
            await self.playwright.stop()
            self.playwright = None
