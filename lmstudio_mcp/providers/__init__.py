"""推理服务集成层。

该包下的模块负责：
- 定义客户端抽象接口 (base)。
- 提供 LM Studio 的具体实现 (lmstudio_client)。
"""

from typing import Optional

from lmstudio_mcp.config.settings import Settings, get_settings
from lmstudio_mcp.providers.base import InferenceClient
from lmstudio_mcp.providers.lmstudio_client import LMStudioClient


def create_client(cfg: Optional[Settings] = None) -> InferenceClient:
    """根据配置创建客户端实例，默认使用 get_settings()。"""

    return LMStudioClient(cfg or get_settings())
