import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from lmstudio_mcp.config.settings import Settings, get_settings

LOGGER_NAME = "lmstudio_mcp"


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: bool = False):
        super().__init__()
        self._redact = redact

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if self._redact:
            msg = (msg or "")[:64]
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(cfg: Optional[Settings] = None) -> logging.Logger:
    cfg = cfg or get_settings()
    # stdout 留给 MCP 协议流，日志只能写 stderr 或文件
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(cfg.log_level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter(redact=cfg.log_redact_content)
    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    if cfg.log_dir:
        log_dir = Path(cfg.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / "lmstudio-mcp.log", encoding="utf-8")
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    return logger


# 未调用 setup_logger 前只挂 NullHandler，导入本模块不会加载配置
logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())
