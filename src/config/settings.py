"""
应用配置

所有配置项均从环境变量读取，未设置时使用默认值。

使用方式:
    from src.config import config

    config.api_base_url
    config.http_read_timeout
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"环境变量 {name} 不是有效的数字: {value!r}") from None


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"环境变量 {name} 不是有效的整数: {value!r}") from None


class Config:
    """myapp-api 客户端配置"""

    def __init__(self) -> None:
        # 后端服务
        self.api_base_url: str = os.getenv(
            "MYAPP_API_BASE_URL", "http://localhost:8000/myapp-api"
        ).rstrip("/")
        self.relay_service_name: str = os.getenv("MYAPP_RELAY_SERVICE", "myapp-api")
        self.relay_enabled: bool = _env_bool("MYAPP_RELAY_ENABLED", True)

        # 单次请求截止时间（毫秒），未设置时不限制
        self.default_timeout_ms: int | None = _env_int("MYAPP_REQUEST_TIMEOUT_MS", None)

        # 直连 HTTP 客户端
        self.http_connect_timeout: float = _env_float("HTTP_CONNECT_TIMEOUT", 10.0)
        self.http_read_timeout: float = _env_float("HTTP_READ_TIMEOUT", 60.0)
        self.http_write_timeout: float = _env_float("HTTP_WRITE_TIMEOUT", 60.0)
        self.http_pool_timeout: float = _env_float("HTTP_POOL_TIMEOUT", 10.0)
        self.http_max_connections: int = _env_int("HTTP_MAX_CONNECTIONS", 100) or 100
        self.http_keepalive_connections: int = _env_int("HTTP_KEEPALIVE_CONNECTIONS", 20) or 20
        self.http_keepalive_expiry: float = _env_float("HTTP_KEEPALIVE_EXPIRY", 30.0)
        self.http_verify_ssl: bool = _env_bool("HTTP_VERIFY_SSL", True)


config = Config()
