"""
传输层

- RelayChannel: 宿主进程提供的特权中继通道（只依赖其请求/返回结构）
- IpcRelayChannel: 适配宿主 IPC 桥的 invoke(channel, params) 调用
- UnavailableRelayChannel: 独立运行（无宿主）时的占位通道
- DirectTransport: 基于 httpx 的直连传输，支持中止信号
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Union, runtime_checkable

import httpx

from src.clients.http_client import HTTPClientPool
from src.core.exceptions import RelayUnavailableError, RequestAbortedError
from src.services.api.timeout import AbortSignal, DeadlineController
from src.services.api.types import RequestDescriptor

PROXY_REQUEST_CHANNEL = "proxy-request"


@runtime_checkable
class RelayChannel(Protocol):
    """
    中继通道契约

    params: {"service": str, "config": {"method", "url", "headers", "body", "timeout"}}
    返回:   {"success": bool, "data"?: Any, "error"?: str, "details"?: {"statusCode"?: int}}
    """

    async def proxy_request(self, params: dict[str, Any]) -> Any: ...


IpcInvoke = Callable[[str, dict[str, Any]], Union[Any, Awaitable[Any]]]


class IpcRelayChannel:
    """通过宿主 IPC 桥发起中继请求"""

    def __init__(self, invoke: IpcInvoke, channel: str = PROXY_REQUEST_CHANNEL) -> None:
        self._invoke = invoke
        self.channel = channel

    async def proxy_request(self, params: dict[str, Any]) -> Any:
        result = self._invoke(self.channel, params)
        if inspect.isawaitable(result):
            result = await result
        return result


class UnavailableRelayChannel:
    """宿主未提供中继通道时使用，任何调用都会报告不可用"""

    def __init__(self, reason: str = "relay channel is not installed") -> None:
        self.reason = reason

    async def proxy_request(self, params: dict[str, Any]) -> Any:
        raise RelayUnavailableError(self.reason)


def parse_response_body(response: httpx.Response) -> Any:
    """解析响应体为 JSON；空响应体返回 None"""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"响应不是有效的 JSON: {e}") from e


class DirectTransport:
    """
    直连传输

    client 为空时从全局连接池取默认客户端。
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await HTTPClientPool.get_default_client_async()

    async def send(
        self,
        url: str,
        descriptor: RequestDescriptor,
        signal: AbortSignal | None = None,
    ) -> httpx.Response:
        """发送请求并返回原始响应；信号已触发时不发送"""
        if signal is not None and signal.aborted:
            raise RequestAbortedError(signal.reason or "aborted")

        client = await self._get_client()
        return await client.request(
            descriptor.method.value,
            url,
            headers=dict(descriptor.headers),
            content=descriptor.body,
        )

    async def send_with_deadline(
        self, url: str, descriptor: RequestDescriptor
    ) -> httpx.Response:
        """在 descriptor.timeout_ms 截止时间内发送请求"""
        async with DeadlineController(descriptor.timeout_ms) as controller:
            return await controller.run(self.send(url, descriptor, controller.signal))

    async def aclose(self) -> None:
        """关闭底层客户端；使用全局连接池时关闭池中的默认客户端"""
        if self._client is not None:
            await self._client.aclose()
        else:
            await HTTPClientPool.close_all()


__all__ = [
    "DirectTransport",
    "IpcInvoke",
    "IpcRelayChannel",
    "PROXY_REQUEST_CHANNEL",
    "RelayChannel",
    "UnavailableRelayChannel",
    "parse_response_body",
]
