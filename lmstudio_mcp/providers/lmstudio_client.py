"""LM Studio 请求转发器。

LM Studio 提供 OpenAI 兼容接口：
- URL: {base_url}/v1{endpoint}
- 无认证，只需 Content-Type: application/json

每次调用只发一个 HTTP 请求，不重试、不分页。错误被包装为：
- NetworkError: 连接失败、DNS 失败、超时等传输层错误；
- ApiError: 非 2xx 状态码；
- ResponseParseError: 响应体不是合法 JSON。
"""

from typing import Any, Dict, List, Optional

import httpx

from lmstudio_mcp.config.settings import Settings, get_settings
from lmstudio_mcp.domain.exceptions import ApiError, NetworkError, ResponseParseError
from lmstudio_mcp.domain.models import ChatChoice, ChatMessage, ChatRequest, ChatResult, ModelInfo
from lmstudio_mcp.infrastructure.logging.logger import logger

V1 = "/v1"


class LMStudioClient:
    """LM Studio 客户端实现。"""

    name = "lmstudio"

    def __init__(self, cfg: Optional[Settings] = None):
        self._settings = cfg or get_settings()

    @property
    def base_url(self) -> str:
        return self._settings.base_url.rstrip("/")

    @property
    def default_model(self) -> str:
        return self._settings.default_model

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{V1}{endpoint}"

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = self.url_for(endpoint)
        merged_headers = {"Content-Type": "application/json", **(headers or {})}
        logger.debug("lmstudio.request", extra={"extra": {"method": method, "url": url}})
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.request(method, url, json=body, headers=merged_headers)
        except httpx.RequestError as e:
            raise NetworkError(
                code="NETWORK_ERROR",
                message=f"LM Studio API request failed: {str(e) or type(e).__name__}",
                url=url,
            ) from e
        if not 200 <= resp.status_code < 300:
            raise ApiError(
                code="API_ERROR",
                message=f"LM Studio API request failed: HTTP {resp.status_code}: {resp.reason_phrase}",
                http_status=resp.status_code,
                status_text=resp.reason_phrase,
                url=url,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ResponseParseError(
                code="PARSE_ERROR",
                message=f"LM Studio API response parsing failed: {e}",
                url=url,
            ) from e

    async def list_models(self) -> List[ModelInfo]:
        data = await self.request("/models")
        models: List[ModelInfo] = []
        for item in (data or {}).get("data") or []:
            models.append(
                ModelInfo(
                    id=item.get("id"),
                    object=item.get("object"),
                    created=item.get("created"),
                    owned_by=item.get("owned_by"),
                    name=item.get("name"),
                )
            )
        return models

    async def chat(self, req: ChatRequest) -> ChatResult:
        data = await self.request("/chat/completions", method="POST", body=req.to_payload())
        return self._parse_response(data or {})

    def _parse_response(self, data: Dict[str, Any]) -> ChatResult:
        choices: List[ChatChoice] = []
        for i, ch in enumerate(data.get("choices") or []):
            msg = ch.get("message") or {}
            choices.append(
                ChatChoice(
                    index=ch.get("index", i),
                    message=ChatMessage(
                        role=msg.get("role") or "assistant",
                        content=msg.get("content") or "",
                    ),
                    finish_reason=ch.get("finish_reason"),
                )
            )
        return ChatResult(
            model=data.get("model"),
            choices=choices,
            usage=data.get("usage"),
            raw=data,
        )
