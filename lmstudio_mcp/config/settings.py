"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置，
命令行参数 --base-url 通过构造参数覆盖，优先级最高。
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


DEFAULT_BASE_URL = "http://localhost:1234"


def _yaml_candidates() -> List[Path]:
    """config.yaml 候选路径，显式指定的文件优先。"""
    candidates: List[Path] = []
    explicit = os.getenv("LMSTUDIO_MCP_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(Path.cwd() / "config.yaml")
    return candidates


def _yaml_files() -> List[Path]:
    """只返回第一个存在的候选文件，与其余文件不做合并。"""
    for path in _yaml_candidates():
        if path.is_file():
            return [path]
    return []


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- LM Studio 相关配置 ----
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="LM Studio 服务根地址，请求时会追加 /v1",
    )
    default_model: str = Field(
        default="local-model",
        description="chat/completions 请求体中的 model 字段",
    )
    http_timeout: float = Field(default=120.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 日志 ----
    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: Optional[str] = Field(default=None, description="日志目录，为空时只写 stderr")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="LMSTUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=_yaml_files()),
            file_secret_settings,
        )


def load_settings(**overrides) -> Settings:
    """重新加载配置；overrides 中值为 None 的键会被忽略。"""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """进程级共享配置，首次调用时才加载。"""
    return Settings()
