"""
全局HTTP客户端池管理
直连请求复用同一个 AsyncClient，避免每次请求都创建新连接

说明：
1. 默认客户端：所有直连请求共用，首次使用时延迟创建，关闭后再次使用时重建
2. 连接池复用：Keep-alive 连接减少 TCP 握手开销
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from src.config import config
from src.core.logger import logger
from src.utils.ssl_utils import get_ssl_context

# 模块级锁，避免类属性延迟初始化的竞态条件
_default_client_lock = asyncio.Lock()


def _default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.http_connect_timeout,
        read=config.http_read_timeout,
        write=config.http_write_timeout,
        pool=config.http_pool_timeout,
    )


def _default_limits() -> httpx.Limits:
    return httpx.Limits(
        max_connections=config.http_max_connections,
        max_keepalive_connections=config.http_keepalive_connections,
        keepalive_expiry=config.http_keepalive_expiry,
    )


def _verify_option() -> Any:
    return get_ssl_context() if config.http_verify_ssl else False


class HTTPClientPool:
    """
    全局HTTP客户端池

    管理可重用的httpx.AsyncClient实例,避免频繁创建/销毁连接
    """

    _default_client: httpx.AsyncClient | None = None

    @classmethod
    def _create_default_client(cls) -> httpx.AsyncClient:
        client = httpx.AsyncClient(
            verify=_verify_option(),
            timeout=_default_timeout(),
            limits=_default_limits(),
            follow_redirects=True,
        )
        logger.info(
            "全局HTTP客户端池已初始化: max_connections={}, keepalive={}, keepalive_expiry={}s",
            config.http_max_connections,
            config.http_keepalive_connections,
            config.http_keepalive_expiry,
        )
        return client

    @classmethod
    async def get_default_client_async(cls) -> httpx.AsyncClient:
        """
        获取默认的HTTP客户端（异步安全版本）

        客户端已关闭时重新创建
        """
        client = cls._default_client
        if client is not None and not client.is_closed:
            return client

        async with _default_client_lock:
            # 双重检查，避免重复创建
            if cls._default_client is None or cls._default_client.is_closed:
                cls._default_client = cls._create_default_client()
        return cls._default_client

    @classmethod
    async def close_all(cls) -> None:
        """关闭默认HTTP客户端（应用退出时调用，可重复调用）"""
        client = cls._default_client
        cls._default_client = None
        if client is not None and not client.is_closed:
            await client.aclose()
            logger.info("默认HTTP客户端已关闭")

