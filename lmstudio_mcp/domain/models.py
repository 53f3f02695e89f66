"""LM Studio 请求与响应数据模型。

本模块定义了转发层与工具处理函数之间共享的数据结构：

- ChatMessage: 一条对话消息（system/user/assistant）。
- ChatRequest: 发往 /v1/chat/completions 的请求体。
- ChatResult: 从响应 JSON 解析出的结果，仅在单次调用内使用，不做保留。
- ModelInfo: /v1/models 返回的单个模型条目。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional


# 与 OpenAI 兼容接口的 role 字段对应
Role = Literal["system", "user", "assistant"]


@dataclass
class ChatMessage:
    """一条对话消息，既可用于请求，也可用于响应。"""

    role: Role
    content: str

    def to_payload(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatRequest:
    """一次完整的聊天请求。

    messages 的顺序即发送顺序：可选的 system 消息在前，user 消息在后。
    """

    model: str
    messages: List[ChatMessage]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_payload() for m in self.messages],
        }


@dataclass
class ChatUsage:
    """token 统计信息。"""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatChoice:
    """单个候选回答（通常只用 index=0 的一条）。"""

    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None


@dataclass
class ChatResult:
    """一次对话调用的结果。

    - model: 服务端实际使用的模型 ID，响应中缺失时为 None。
    - choices: 候选回答列表。
    - usage: 原始 usage 字段，缺失时为 None。
    - raw: 原始响应 JSON，用于调试。
    """

    model: Optional[str]
    choices: List[ChatChoice]
    usage: Optional[Dict[str, Any]] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def first_content(self) -> Optional[str]:
        if not self.choices:
            return None
        return self.choices[0].message.content or None

    def parsed_usage(self) -> ChatUsage:
        raw = self.usage or {}
        return ChatUsage(
            prompt_tokens=raw.get("prompt_tokens", 0),
            completion_tokens=raw.get("completion_tokens", 0),
            total_tokens=raw.get("total_tokens", 0),
        )


@dataclass
class ModelInfo:
    """/v1/models 中的一个模型条目。"""

    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    owned_by: Optional[str] = None
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.id or self.name or "Unknown Model"
