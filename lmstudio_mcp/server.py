"""MCP stdio 服务入口。

基于官方 MCP Python SDK 的 low-level Server：
- SDK 负责 JSON-RPC 帧与 initialize / tools/list / tools/call；
- 本模块把 ToolRegistry 适配为 tools/list 与 tools/call 的处理函数；
- stdout 只用于协议流，所有诊断信息写 stderr。
"""

import argparse
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from lmstudio_mcp import __version__
from lmstudio_mcp.config.settings import Settings, load_settings
from lmstudio_mcp.domain.exceptions import ToolInputError, ToolNotFoundError
from lmstudio_mcp.infrastructure.logging.logger import logger, setup_logger
from lmstudio_mcp.providers import create_client
from lmstudio_mcp.tools.definitions import ToolDef
from lmstudio_mcp.tools.handlers import build_registry
from lmstudio_mcp.tools.registry import ToolRegistry

SERVER_NAME = "lmstudio-mcp"
SERVER_INSTRUCTIONS = "A Model Context Protocol server for LM Studio integration"


def to_mcp_tool(definition: ToolDef) -> types.Tool:
    return types.Tool(
        name=definition.name,
        title=definition.title,
        description=definition.description,
        inputSchema=definition.input_schema(),
    )


async def dispatch(registry: ToolRegistry, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
    """调用注册表并把结果转换为 MCP 内容块。

    未知工具与参数错误转换为 McpError，其余失败已由处理函数格式化为文本。
    """

    try:
        result = await registry.invoke(name, arguments)
    except ToolNotFoundError as exc:
        raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=exc.message)) from exc
    except ToolInputError as exc:
        raise McpError(
            types.ErrorData(
                code=types.INVALID_PARAMS,
                message=f"Invalid arguments for tool {name}: {exc.message}",
                data={"field": exc.field},
            )
        ) from exc
    return [types.TextContent(type="text", text=block.text) for block in result.content]


def build_server(registry: ToolRegistry) -> Server:
    server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [to_mcp_tool(d) for d in registry.list_tools()]

    # 直接注册 tools/call：McpError 要原样交给 SDK 作为 JSON-RPC 错误返回，参数只由注册表校验
    async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
        content = await dispatch(registry, req.params.name, req.params.arguments)
        return types.ServerResult(types.CallToolResult(content=content, isError=False))

    server.request_handlers[types.CallToolRequest] = call_tool

    return server


async def serve(cfg: Settings, registry: Optional[ToolRegistry] = None) -> None:
    registry = registry or build_registry(create_client(cfg))
    server = build_server(registry)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("LM Studio MCP Server connected successfully", extra={"extra": {"tools": len(registry)}})
        await server.run(read_stream, write_stream, server.create_initialization_options())


def parse_args(argv: Optional[Sequence[str]] = None) -> Tuple[argparse.Namespace, List[str]]:
    parser = argparse.ArgumentParser(prog=SERVER_NAME, description=SERVER_INSTRUCTIONS)
    parser.add_argument(
        "--base-url",
        dest="base_url",
        default=None,
        help="LM Studio base URL (default: http://localhost:1234)",
    )
    return parser.parse_known_args(argv)


def run(argv: Optional[Sequence[str]] = None) -> int:
    args, unknown = parse_args(argv)
    try:
        cfg = load_settings(base_url=args.base_url)
    except ValidationError as exc:
        sys.stderr.write(f"Failed to start server: {exc}\n")
        return 1

    log = setup_logger(cfg)
    if unknown:
        log.warning("ignoring unknown arguments", extra={"extra": {"args": unknown}})
    log.info("LM Studio MCP Server starting...", extra={"extra": {"base_url": cfg.base_url}})
    try:
        anyio.run(serve, cfg)
    except KeyboardInterrupt:
        log.info("LM Studio MCP Server stopped")
    except Exception as exc:
        log.exception(f"Failed to start server: {exc}")
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
