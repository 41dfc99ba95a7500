"""
配置常量
"""
import os
from urllib.parse import urlparse

# 服务器配置
SERVER_NAME = "browser-debug-server"
SERVER_VERSION = "1.0.0"
DEFAULT_HOST = os.environ.get("BROWSER_DEBUG_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.environ.get("BROWSER_DEBUG_PORT", "3336"))

# 远程调试端点（Chrome 需以 --remote-debugging-port=9222 启动）
CDP_ENDPOINT_URL = os.environ.get("BROWSER_DEBUG_CDP_URL", "http://localhost:9222")

# 日志配置（输出到 stderr，stdout 留给 stdio 传输）
LOG_LEVEL = os.environ.get("BROWSER_DEBUG_LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# 标签页标识回退值
UNTITLED_TAB = "Untitled"
UNKNOWN_TAB = "Unknown Tab"


def debugging_port(cdp_url: str) -> int:
    """从端点地址中取出调试端口"""
    return urlparse(cdp_url).port or 9222
