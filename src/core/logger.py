"""
统一日志系统 - 基于 loguru

- 控制台: 开发环境 DEBUG，APP_ENV=production 时 INFO（LOG_LEVEL 可覆盖）
- 文件: LOG_DIR/client.log，DEBUG 级别，10MB 轮转，保留 7 天；LOG_DISABLE_FILE=true 时关闭

使用方式:
    from src.core.logger import logger

    logger.warning("中继失败: {}", error)
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from loguru import logger

IS_PRODUCTION = os.environ.get("APP_ENV", "development").lower() == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG").upper()

DISABLE_FILE_LOG = os.getenv("LOG_DISABLE_FILE", "false").lower() == "true"

LOG_DIR = Path(os.getenv("LOG_DIR", str(Path(__file__).resolve().parent.parent.parent / "logs")))

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"

logger.remove()

# 生产环境关闭 diagnose，避免请求头等敏感信息随堆栈进入日志
logger.add(
    sys.stdout,
    format=CONSOLE_FORMAT,
    level=LOG_LEVEL,
    colorize=not IS_PRODUCTION,
    diagnose=not IS_PRODUCTION,
)

if not DISABLE_FILE_LOG:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(
        LOG_DIR / "client.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        encoding="utf-8",
        diagnose=not IS_PRODUCTION,
        catch=True,
    )

# httpx 自身的请求日志与直连日志重复
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

__all__ = ["logger"]
