"""
请求 URL 工具。

负责:
- 拼接 base_url 与 endpoint
- URL 脱敏（用于日志记录）
"""

from __future__ import annotations

import re

# URL 中需要脱敏的查询参数（正则模式）
_SENSITIVE_QUERY_PARAMS_PATTERN = re.compile(
    r"([?&])(key|api_key|apikey|token|access_token|secret|password|credential)=([^&]*)",
    re.IGNORECASE,
)


def redact_url_for_log(url: str) -> str:
    """
    对 URL 中的敏感查询参数进行脱敏，用于日志记录

    将 ?token=xxx 替换为 ?token=***
    """
    return _SENSITIVE_QUERY_PARAMS_PATTERN.sub(r"\1\2=***", url)


def build_request_url(base_url: str, endpoint: str) -> str:
    """
    拼接直连请求的完整 URL

    兼容 base_url 末尾带斜杠、endpoint 不以斜杠开头的写法；
    endpoint 本身是绝对 URL 时直接返回。
    """
    if endpoint.startswith(("http://", "https://")):
        return endpoint
    base = base_url.rstrip("/")
    if not endpoint:
        return base
    if not endpoint.startswith("/"):
        endpoint = f"/{endpoint}"
    return f"{base}{endpoint}"
