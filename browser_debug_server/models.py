"""
数据模型定义
"""
import asyncio
from dataclasses import dataclass, field
from typing import List


@dataclass
class TabInfo:
    """list_tabs 的一行"""
    index: int
    identifier: str
    log_count: int = 0


@dataclass
class TabLogs:
    """某个标签页当前的日志缓冲"""
    index: int
    identifier: str
    lines: List[str] = field(default_factory=list)


@dataclass
class ConsoleEvent:
    """页面控制台消息事件"""
    handle: str
    message_type: str
    message_text: str

    def format(self) -> str:
        return f"{self.message_type}: {self.message_text}"


@dataclass
class PageClosedEvent:
    """页面关闭事件"""
    handle: str


@dataclass
class FlushMarker:
    """队列中的同步点：消费者处理到它时，之前入队的事件均已处理"""
    reached: "asyncio.Future[None]"
