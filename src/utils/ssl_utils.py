"""
SSL 上下文工具

直连请求使用 certifi 证书包，避免桌面端系统证书缺失导致握手失败。
"""

from __future__ import annotations

import ssl
from functools import lru_cache

import certifi


@lru_cache(maxsize=1)
def get_ssl_context() -> ssl.SSLContext:
    """获取基于 certifi 证书包的 SSL 上下文（进程内复用）"""
    return ssl.create_default_context(cafile=certifi.where())
