#!/usr/bin/env python3
"""
基于官方 MCP SDK 的浏览器控制台调试服务器

默认使用 stdio 传输，也可以通过 --transport sse 以 SSE 方式运行。

项目结构：
- browser_debug_server/
  ├── __init__.py      # 模块导出
  ├── config.py        # 配置常量
  ├── models.py        # 数据模型
  ├── connection.py    # 浏览器连接管理器
  ├── tab_logs.py      # 标签页日志注册表（核心逻辑）
  ├── session.py       # 调试会话
  └── tools.py         # MCP 工具定义
"""
import argparse
import contextlib
import logging
import sys
from typing import List, Optional

import anyio
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from .config import (
    CDP_ENDPOINT_URL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    LOG_FORMAT,
    LOG_LEVEL,
    SERVER_NAME,
    SERVER_VERSION,
)
from .connection import BrowserConnection
from .session import BrowserDebugSession
from .tools import create_tools, handle_tool_call

logger = logging.getLogger(__name__)


def create_server(session: BrowserDebugSession) -> Server:
    """创建 MCP 服务器并注册工具"""
    app = Server(SERVER_NAME, version=SERVER_VERSION)

    @app.list_tools()
    async def list_tools() -> List[Tool]:
        """列出所有可用工具"""
        return create_tools()

    @app.call_tool()
    async def call_tool(name: str, arguments: dict) -> List[TextContent]:
        """处理工具调用"""
        logger.debug(f"工具调用: {name} {arguments}")
        return await handle_tool_call(session, name, arguments)

    return app


async def run_stdio(session: BrowserDebugSession):
    """通过 stdin/stdout 运行 MCP 服务器"""
    app = create_server(session)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await session.stop()


def create_starlette_app(session: BrowserDebugSession) -> Starlette:
    """创建 SSE 传输的 Starlette 应用"""
    app = create_server(session)
    sse_transport = SseServerTransport("/messages/")

    async def handle_sse(request):
        """处理 SSE 连接"""
        logger.info(f"收到 SSE 连接请求: {request.method} {request.url}")
        async with sse_transport.connect_sse(
            request.scope, request.receive, request._send
        ) as streams:
            await app.run(streams[0], streams[1], app.create_initialization_options())
        logger.info("MCP 会话已结束")
        return Response()

    async def health_check(request):
        """健康检查"""
        return JSONResponse({
            "status": "healthy",
            "service": SERVER_NAME,
            "version": SERVER_VERSION,
            "browser_connected": session.connection.connected,
            "observed_tabs": session.registry.observed_count,
        })

    @contextlib.asynccontextmanager
    async def lifespan(_app):
        try:
            yield
        finally:
            await session.stop()

    return Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Route("/mcp", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse_transport.handle_post_message),
            Route("/health", endpoint=health_check, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="browser-debug-mcp",
        description="读取远程调试浏览器中各标签页控制台日志的 MCP 服务器",
    )
    parser.add_argument("--transport", choices=["stdio", "sse"], default="stdio", help="传输方式（默认 stdio）")
    parser.add_argument("--host", default=DEFAULT_HOST, help="SSE 监听地址")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="SSE 监听端口")
    parser.add_argument("--cdp-url", default=CDP_ENDPOINT_URL, help="浏览器远程调试端点")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="日志级别")
    return parser


def main(argv: Optional[List[str]] = None):
    """启动服务器"""
    args = build_parser().parse_args(argv)

    # 配置日志（stdout 被 stdio 传输占用，日志写 stderr）
    logging.basicConfig(
        level=args.log_level.upper(),
        format=LOG_FORMAT,
        stream=sys.stderr
    )

    session = BrowserDebugSession(BrowserConnection(args.cdp_url))
    logger.info(f"{SERVER_NAME} {SERVER_VERSION} 启动，传输方式: {args.transport}，调试端点: {args.cdp_url}")

    if args.transport == "sse":
        import uvicorn

        logger.info(f"SSE 端点: http://{args.host if args.host != '0.0.0.0' else 'localhost'}:{args.port}/sse")
        uvicorn.run(create_starlette_app(session), host=args.host, port=args.port)
    else:
        try:
            anyio.run(run_stdio, session)
        except KeyboardInterrupt:
            logger.info("服务器已停止")


if __name__ == "__main__":
    main()
