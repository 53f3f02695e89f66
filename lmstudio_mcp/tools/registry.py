"""工具注册表。

进程启动时构造一次，之后只读：
- register(): 注册工具，同名重复注册直接抛 ConfigurationError。
- list_tools(): 按注册顺序返回工具定义，用于 tools/list。
- invoke(): 校验参数后调用处理函数，返回 ToolResult。
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from lmstudio_mcp.domain.exceptions import ConfigurationError, ToolInputError, ToolNotFoundError
from lmstudio_mcp.infrastructure.logging.logger import logger
from lmstudio_mcp.tools.definitions import ToolDef, ToolHandler, ToolParam, ToolResult

_MISSING = object()

_TYPE_NAMES = {
    "string": "a string",
    "integer": "an integer",
    "number": "a number",
    "boolean": "a boolean",
}


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: Dict[str, Tuple[ToolDef, ToolHandler]] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def register(self, definition: ToolDef, handler: ToolHandler) -> None:
        if definition.name in self._tools:
            raise ConfigurationError(
                code="DUPLICATE_TOOL",
                message=f"Tool already registered: {definition.name}",
                tool=definition.name,
            )
        self._tools[definition.name] = (definition, handler)

    def list_tools(self) -> List[ToolDef]:
        return [definition for definition, _ in self._tools.values()]

    async def invoke(self, name: str, raw_arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        entry = self._tools.get(name)
        if entry is None:
            raise ToolNotFoundError(code="UNKNOWN_TOOL", message=f"Tool not found: {name}", tool=name)
        definition, handler = entry
        arguments = validate_arguments(definition, raw_arguments)
        logger.info("tool.invoke", extra={"extra": {"tool": name, "args": sorted(arguments)}})
        result = await handler(arguments)
        if result.is_error:
            logger.warning("tool.failed", extra={"extra": {"tool": name}})
        return result


def validate_arguments(definition: ToolDef, raw_arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """按 ToolDef 校验参数，补全默认值，丢弃未声明的字段。"""

    if raw_arguments is None:
        raw_arguments = {}
    if not isinstance(raw_arguments, Mapping):
        raise ToolInputError(
            code="INVALID_ARGUMENT",
            message="arguments must be an object",
            tool=definition.name,
        )

    unknown = set(raw_arguments) - set(definition.params)
    if unknown:
        logger.debug("tool.unknown_args", extra={"extra": {"tool": definition.name, "keys": sorted(unknown)}})

    validated: Dict[str, Any] = {}
    for name, param in definition.params.items():
        value = raw_arguments.get(name, _MISSING)
        if value is _MISSING or value is None:
            if param.required:
                raise _input_error(definition, name, "is required")
            if "default" in param.schema:
                validated[name] = param.schema["default"]
            continue
        _check_value(definition, param, value)
        validated[name] = value
    return validated


def _check_value(definition: ToolDef, param: ToolParam, value: Any) -> None:
    schema = param.schema
    expected = schema.get("type", "string")
    if not _matches_type(expected, value):
        raise _input_error(definition, param.name, f"must be {_TYPE_NAMES.get(expected, expected)}")
    if "enum" in schema and value not in schema["enum"]:
        allowed = ", ".join(repr(v) for v in schema["enum"])
        raise _input_error(definition, param.name, f"must be one of {allowed}")
    if "minimum" in schema and value < schema["minimum"]:
        raise _input_error(definition, param.name, f"must be >= {schema['minimum']}")
    if "maximum" in schema and value > schema["maximum"]:
        raise _input_error(definition, param.name, f"must be <= {schema['maximum']}")


def _matches_type(expected: str, value: Any) -> bool:
    # bool 是 int 的子类，需单独排除
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return True


def _input_error(definition: ToolDef, field: str, reason: str) -> ToolInputError:
    return ToolInputError(
        code="INVALID_ARGUMENT",
        message=f"{field}: {reason}",
        field=field,
        tool=definition.name,
    )
