"""MCP 工具实现。

每个 LM Studio 相关工具最多发起一次 HTTP 调用，并把 JSON 结果整理成文本。
转发器抛出的任何异常都在处理函数内部捕获，作为普通文本结果返回，
客户端总能拿到可展示的信息，而不是协议级错误。
"""

import json
from dataclasses import asdict
from typing import Any, Dict

from lmstudio_mcp.domain.models import ChatMessage, ChatRequest
from lmstudio_mcp.infrastructure.logging.logger import logger
from lmstudio_mcp.providers.base import InferenceClient
from lmstudio_mcp.tools.definitions import ToolDef, ToolHandler, ToolParam, ToolResult
from lmstudio_mcp.tools.registry import ToolRegistry

PROBE_PROMPT = "What model are you?"
MODEL_LOADED_HINT = "Note: Make sure a model is loaded and running in LM Studio."
NO_MODELS_MESSAGE = "No models found in LM Studio. Make sure you have loaded models in LM Studio."


def _describe(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


ECHO_DEF = ToolDef(
    name="echo",
    title="Echo Tool",
    description="Echoes back the provided text",
    params={
        "text": ToolParam(
            name="text",
            description="The text to echo back",
            required=True,
            schema={"type": "string"},
        )
    },
)

LIST_MODELS_DEF = ToolDef(
    name="lmstudio_list_models",
    title="List LM Studio Models",
    description="Get a list of all available models in LM Studio",
)

CURRENT_MODEL_DEF = ToolDef(
    name="lmstudio_get_current_model",
    title="Get Current LM Studio Model",
    description="Identify the currently loaded model in LM Studio",
)

CHAT_COMPLETION_DEF = ToolDef(
    name="lmstudio_chat_completion",
    title="LM Studio Chat Completion",
    description="Generate text completion using the current LM Studio model",
    params={
        "prompt": ToolParam(
            name="prompt",
            description="The user prompt/message",
            required=True,
            schema={"type": "string"},
        ),
        "system_prompt": ToolParam(
            name="system_prompt",
            description="Optional system prompt",
            required=False,
            schema={"type": "string"},
        ),
    },
)


async def echo(args: Dict[str, Any]) -> ToolResult:
    return ToolResult.text(f"Echo: {args['text']}")


def make_list_models_tool(client: InferenceClient) -> ToolHandler:
    async def _run(args: Dict[str, Any]) -> ToolResult:
        try:
            models = await client.list_models()
        except Exception as exc:
            logger.warning("lmstudio_list_models.error", extra={"extra": {"client": client.name, "error": _describe(exc)}})
            return ToolResult.failure(f"❌ Failed to list models\nError: {_describe(exc)}")
        if not models:
            return ToolResult.text(NO_MODELS_MESSAGE)
        model_list = "\n".join(f"{i}. {m.display_name}" for i, m in enumerate(models, start=1))
        return ToolResult.text(f"Available LM Studio Models ({len(models)} total):\n\n{model_list}")

    return _run


def make_current_model_tool(client: InferenceClient) -> ToolHandler:
    async def _run(args: Dict[str, Any]) -> ToolResult:
        req = ChatRequest(
            model=client.default_model,
            messages=[ChatMessage(role="user", content=PROBE_PROMPT)],
        )
        try:
            res = await client.chat(req)
        except Exception as exc:
            logger.warning("lmstudio_get_current_model.error", extra={"extra": {"client": client.name, "error": _describe(exc)}})
            return ToolResult.failure(
                f"❌ Failed to get current model\nError: {_describe(exc)}\n\n{MODEL_LOADED_HINT}"
            )
        model = res.model or "unknown"
        message = res.first_content() or "No response"
        return ToolResult.text(f"Current Model: {model}\n\nModel Response: {message}")

    return _run


def make_chat_completion_tool(client: InferenceClient) -> ToolHandler:
    async def _run(args: Dict[str, Any]) -> ToolResult:
        messages = []
        # 空字符串的 system_prompt 视为未提供
        if args.get("system_prompt"):
            messages.append(ChatMessage(role="system", content=args["system_prompt"]))
        messages.append(ChatMessage(role="user", content=args["prompt"]))
        try:
            res = await client.chat(ChatRequest(model=client.default_model, messages=messages))
        except Exception as exc:
            logger.warning("lmstudio_chat_completion.error", extra={"extra": {"client": client.name, "error": _describe(exc)}})
            return ToolResult.failure(
                f"❌ Failed to generate completion\nError: {_describe(exc)}\n\n{MODEL_LOADED_HINT}"
            )
        completion = res.first_content() or "No response generated"
        model = res.model or "unknown"
        usage = json.dumps(asdict(res.parsed_usage()), indent=2, ensure_ascii=False)
        return ToolResult.text(f"**Model:** {model}\n\n**Response:**\n{completion}\n\n**Usage:** {usage}")

    return _run


def register_default_tools(registry: ToolRegistry, client: InferenceClient) -> ToolRegistry:
    registry.register(ECHO_DEF, echo)
    registry.register(LIST_MODELS_DEF, make_list_models_tool(client))
    registry.register(CURRENT_MODEL_DEF, make_current_model_tool(client))
    registry.register(CHAT_COMPLETION_DEF, make_chat_completion_tool(client))
    return registry


def build_registry(client: InferenceClient) -> ToolRegistry:
    return register_default_tools(ToolRegistry(), client)
