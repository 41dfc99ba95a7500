"""
调试会话：进程启动时创建一次，显式传递给所有工具处理函数
"""
from typing import Optional

from .connection import BrowserConnection
from .tab_logs import TabLogRegistry


class BrowserDebugSession:
    """持有浏览器连接和标签页日志注册表"""

    def __init__(self, connection: Optional[BrowserConnection] = None):
        self.connection = connection or BrowserConnection()
        self.registry = TabLogRegistry(self.connection)

    async def stop(self):
        """停止事件消费任务和 Playwright 驱动"""
        await self.registry.close()
        await self.connection.stop()
