"""
MCP 工具定义和调用处理
包含 list_tabs / get_logs / clear_logs 三个工具
"""
from typing import Any, Dict, List

from mcp.types import TextContent, Tool

from .config import debugging_port
from .session import BrowserDebugSession


TAB_INDEX_SCHEMA = {
    "type": "object",
    "properties": {
        "tabIndex": {"type": "integer", "description": "list_tabs 返回的标签页编号（1, 2, 3 ...）"}
    },
    "required": ["tabIndex"]
}


def create_tools() -> List[Tool]:
    """创建并返回所有可用的工具列表"""
    return [
        Tool(
            name="list_tabs",
            description="列出远程浏览器中所有打开的标签页及其已记录的控制台日志数量",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="get_logs",
            description="获取指定标签页的控制台日志",
            inputSchema=TAB_INDEX_SCHEMA
        ),
        Tool(
            name="clear_logs",
            description="清空指定标签页的控制台日志",
            inputSchema=TAB_INDEX_SCHEMA
        ),
    ]


async def list_tabs(session: BrowserDebugSession) -> str:
    tabs = await session.registry.list_tabs()
    if not tabs:
        port = debugging_port(session.connection.cdp_url)
        return f"No tabs found. Make sure Chrome is running with --remote-debugging-port={port}"

    lines = [f"{tab.index}. {tab.identifier} ({tab.log_count} logs)" for tab in tabs]
    return f"Found {len(tabs)} tab(s):\n" + "\n".join(lines)


async def get_logs(session: BrowserDebugSession, tabIndex: int) -> str:
    tab = await session.registry.get_logs(tabIndex)
    if not tab.lines:
        return f"No console logs for tab: {tab.identifier}"
    return "\n".join(tab.lines)


async def clear_logs(session: BrowserDebugSession, tabIndex: int) -> str:
    page_id = await session.registry.clear_logs(tabIndex)
    return f"Cleared logs for: {page_id}"


async def handle_tool_call(session: BrowserDebugSession, name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    """
    处理工具调用

    编号越界（InvalidTabIndexError）和未知工具（ValueError）直接抛出，
    由 MCP SDK 转换为 isError=true 的结果。未在 schema 中声明的参数会被忽略。
    """
    tool_methods = {
        "list_tabs": list_tabs,
        "get_logs": get_logs,
        "clear_logs": clear_logs,
    }

    if name not in tool_methods:
        raise ValueError(f"Unknown tool: {name}")

    declared = {tool.name: tool.inputSchema["properties"] for tool in create_tools()}[name]
    kwargs = {key: value for key, value in (arguments or {}).items() if key in declared}

    method = tool_methods[name]
    text = await method(session, **kwargs)

    return [TextContent(type="text", text=text)]
