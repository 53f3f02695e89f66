"""统一异常模型。

所有跨模块抛出的错误都继承自 BridgeError，便于在 MCP 适配层或
工具处理函数中统一捕获：

- 配置错误（重复注册工具）：启动时直接失败。
- 输入错误（未知工具、参数不合法）：作为协议级错误返回给调用方。
- 网络/HTTP/解析错误：由各工具处理函数捕获并格式化为文本结果。
"""

from typing import Optional


class BridgeError(Exception):
    """异常基类。

    Attributes:
        code: 机器可读错误码（如 "UNKNOWN_TOOL"）。
        message: 用户可读错误信息。
        extra: 其他补充字段（例如 tool、endpoint 等）。
    """

    def __init__(self, code: str, message: str, **extra):
        self.code = code
        self.message = message
        self.extra = extra
        super().__init__(message)


class ConfigurationError(BridgeError):
    """启动阶段的配置错误，例如同名工具重复注册。"""


class ToolNotFoundError(BridgeError):
    """调用了未注册的工具。"""


class ToolInputError(BridgeError):
    """工具参数未通过 schema 校验。"""

    def __init__(self, code: str, message: str, field: Optional[str] = None, **extra):
        self.field = field
        super().__init__(code, message, **extra)


class NetworkError(BridgeError):
    """网络层错误，例如连接被拒绝、DNS 失败、超时等。"""


class ApiError(BridgeError):
    """LM Studio 返回非 2xx 状态码时抛出。"""

    def __init__(self, code: str, message: str, http_status: int, status_text: str = "", **extra):
        self.http_status = http_status
        self.status_text = status_text
        super().__init__(code, message, **extra)


class ResponseParseError(BridgeError):
    """响应体不是合法 JSON。"""
