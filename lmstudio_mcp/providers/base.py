"""推理服务客户端抽象接口。

工具处理函数不直接依赖 httpx，而是依赖此协议：

- LMStudioClient 负责把调用转换成 HTTP 请求并解析响应 JSON。
- 测试中可以用任意实现了同名方法的对象替换。
"""

from typing import Any, Dict, List, Optional, Protocol

from lmstudio_mcp.domain.models import ChatRequest, ChatResult, ModelInfo


class InferenceClient(Protocol):
    """推理服务客户端协议。

    实现者需要提供：
    - name: 名称，用于日志。
    - default_model: chat 请求中使用的模型 ID。
    - request(): 单次 HTTP 调用，返回解析后的 JSON。
    - list_models() / chat(): 基于 request() 的便捷方法。
    """

    name: str
    default_model: str

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        ...

    async def list_models(self) -> List[ModelInfo]:
        ...

    async def chat(self, req: ChatRequest) -> ChatResult:
        ...
