"""
标签页日志注册表
为每个页面挂载唯一的控制台监听器，并按标签页标识保存日志
"""
import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Union

from playwright.async_api import ConsoleMessage, Page

from .config import UNKNOWN_TAB, UNTITLED_TAB
from .connection import BrowserConnection
from .models import ConsoleEvent, FlushMarker, PageClosedEvent, TabInfo, TabLogs

logger = logging.getLogger(__name__)


class InvalidTabIndexError(ValueError):
    """标签页编号超出范围"""

    def __init__(self, tab_index: int, page_count: int):
        self.tab_index = tab_index
        self.page_count = page_count
        super().__init__(
            f"Invalid tab index. Please use a number between 1 and {page_count}"
        )


async def identify(page: Page) -> str:
    """计算页面标识 "<title> - <url>"，从不抛出异常"""
    try:
        url = page.url
        try:
            title = await page.title()
        except Exception:
            title = UNTITLED_TAB
        return f"{title} - {url}"
    except Exception:
        return UNKNOWN_TAB


class TabLogRegistry:
    """
    标签页日志注册表

    - 每个页面实例首次被观察时分配一个不透明句柄，并只挂载一次监听器
    - 控制台消息经事件队列交给单一消费任务，按到达顺序写入缓冲
    - 标识在处理消息时计算，页面导航或改标题后的日志归入新标识
    - 页面关闭后移除其句柄；从不关闭的页面会一直保留（已知的无界增长）
    """

    def __init__(self, connection: BrowserConnection):
        self.connection = connection
        self.tab_logs: Dict[str, List[str]] = {}
        self._handles: Dict[Page, str] = {}
        self._pages: Dict[str, Page] = {}
        self._events: "asyncio.Queue[Union[ConsoleEvent, PageClosedEvent, FlushMarker]]" = asyncio.Queue()
        self._consumer: Optional[asyncio.Task] = None

    # 监听器管理
    def is_observed(self, page: Page) -> bool:
        return page in self._handles

    @property
    def observed_count(self) -> int:
        return len(self._pages)

    def ensure_observed(self, page: Page) -> str:
        """确保页面已挂载控制台监听器（幂等），返回页面句柄"""
        handle = self._handles.get(page)
        if handle is not None:
            return handle

        self._start_consumer()
        handle = f"page_{uuid.uuid4().hex[:12]}"

        def handle_console(msg: ConsoleMessage):
            self._events.put_nowait(ConsoleEvent(handle, msg.type, msg.text))

        def handle_close(_page: Page):
            self._events.put_nowait(PageClosedEvent(handle))

        page.on("console", handle_console)
        page.on("close", handle_close)

        self._handles[page] = handle
        self._pages[handle] = page
        logger.info(f"已挂载控制台监听器: {handle}")
        return handle

    def _start_consumer(self):
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.create_task(self._consume_events())

    async def _consume_events(self):
        """唯一的事件消费者，按到达顺序处理"""
        while True:
            event = await self._events.get()
            if isinstance(event, FlushMarker):
                if not event.reached.done():
                    event.reached.set_result(None)
            elif isinstance(event, PageClosedEvent):
                self._forget(event.handle)
            else:
                await self._append(event)

    async def _append(self, event: ConsoleEvent):
        page = self._pages.get(event.handle)
        page_id = await identify(page) if page is not None else UNKNOWN_TAB
        self.tab_logs.setdefault(page_id, []).append(event.format())
        logger.debug(f"[{page_id}] {event.format()}")

    def _forget(self, handle: str):
        page = self._pages.pop(handle, None)
        if page is not None:
            self._handles.pop(page, None)
        logger.info(f"页面已关闭，移除监听记录: {handle}")

    async def flush(self):
        """
        等待调用前已入队的事件处理完

        只等到本次放入的标记被消费为止，之后到达的事件不影响返回。
        """
        if self._consumer is None or self._consumer.done():
            return
        marker = FlushMarker(asyncio.get_running_loop().create_future())
        self._events.put_nowait(marker)
        await marker.reached

    async def close(self):
        """取消消费任务"""
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None

    # 对外操作
    async def enumerate_pages(self) -> List[Page]:
        """重新枚举页面并为每个页面挂载监听器"""
        pages = await self.connection.list_pages()
        for page in pages:
            self.ensure_observed(page)
        return pages

    async def list_tabs(self) -> List[TabInfo]:
        """列出所有标签页，编号从 1 开始，与枚举顺序一致"""
        pages = await self.enumerate_pages()
        await self.flush()

        tabs = []
        for i, page in enumerate(pages, start=1):
            page_id = await identify(page)
            tabs.append(TabInfo(
                index=i,
                identifier=page_id,
                log_count=len(self.tab_logs.get(page_id, []))
            ))
        return tabs

    async def _resolve(self, tab_index: int) -> Page:
        """按编号解析页面（每次都重新枚举，不缓存编号）"""
        pages = await self.enumerate_pages()
        if tab_index < 1 or tab_index > len(pages):
            raise InvalidTabIndexError(tab_index, len(pages))
        return pages[tab_index - 1]

    async def get_logs(self, tab_index: int) -> TabLogs:
        """获取标签页的全部日志"""
        page = await self._resolve(tab_index)
        await self.flush()
        page_id = await identify(page)
        return TabLogs(
            index=tab_index,
            identifier=page_id,
            lines=list(self.tab_logs.get(page_id, []))
        )

    async def clear_logs(self, tab_index: int) -> str:
        """清空标签页日志（保留空缓冲），返回标签页标识"""
        page = await self._resolve(tab_index)
        await self.flush()
        page_id = await identify(page)
        self.tab_logs[page_id] = []
        logger.info(f"已清空日志: {page_id}")
        return page_id
