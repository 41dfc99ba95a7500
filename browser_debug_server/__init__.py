"""
Browser Debug MCP Server

读取远程调试浏览器中各标签页的控制台日志：
- connection: 浏览器连接管理器
- tab_logs: 标签页日志注册表
- session: 调试会话
- tools: MCP 工具定义
- server: 服务器入口
- config: 配置常量
"""

from .models import TabInfo, TabLogs
from .connection import BrowserConnection
from .tab_logs import InvalidTabIndexError, TabLogRegistry, identify
from .session import BrowserDebugSession
from .tools import create_tools, handle_tool_call
from .config import CDP_ENDPOINT_URL, DEFAULT_HOST, DEFAULT_PORT

__all__ = [
    "TabInfo",
    "TabLogs",
    "BrowserConnection",
    "InvalidTabIndexError",
    "TabLogRegistry",
    "identify",
    "BrowserDebugSession",
    "create_tools",
    "handle_tool_call",
    "CDP_ENDPOINT_URL",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
]
