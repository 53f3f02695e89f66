"""工具数据结构定义。

这些 dataclass 描述了 MCP 工具的 schema 与调用结果：
- ToolDef / ToolParam：通过 tools/list 暴露给客户端，并用于参数校验。
- ContentBlock / ToolResult：处理函数统一的返回类型。
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Literal


@dataclass(frozen=True)
class ToolParam:
    """单个工具参数的定义。

    schema 支持 type(string/integer/number/boolean)、minimum、maximum、enum、default。
    """

    name: str
    description: str
    required: bool
    schema: Dict[str, Any]


@dataclass(frozen=True)
class ToolDef:
    """一个可供客户端调用的工具定义。"""

    name: str
    title: str
    description: str
    params: Dict[str, ToolParam] = field(default_factory=dict)

    def input_schema(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for name, param in self.params.items():
            schema = dict(param.schema or {"type": "string"})
            if param.description:
                schema["description"] = param.description
            properties[name] = schema
            if param.required:
                required.append(name)
        return {"type": "object", "properties": properties, "required": required}


@dataclass
class ContentBlock:
    """单个内容块，目前只有文本。"""

    text: str
    type: Literal["text"] = "text"


@dataclass
class ToolResult:
    """工具执行结果的封装。

    is_error 只用于日志，失败同样作为普通结果返回给客户端。
    """

    content: List[ContentBlock]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[ContentBlock(text=text)])

    @classmethod
    def failure(cls, text: str) -> "ToolResult":
        return cls(content=[ContentBlock(text=text)], is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""


ToolHandler = Callable[[Dict[str, Any]], Awaitable[ToolResult]]
