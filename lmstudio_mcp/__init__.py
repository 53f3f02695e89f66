"""LM Studio MCP 顶层包。

通过 MCP (stdio) 暴露少量工具，并把工具调用转发为对本地 LM Studio
OpenAI 兼容接口的 HTTP 请求。包含配置加载、领域模型、请求转发、
工具注册表与 MCP 服务入口。
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
