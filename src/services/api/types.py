"""
请求分发相关的数据结构

- HttpMethod: 支持的 HTTP 方法
- RequestConfig: 调用方传入的请求配置（封闭的选项集合）
- RequestDescriptor: 合并后的待分发请求，分发后不可变
- ResponseMetadata: 交给响应拦截器的统一响应元数据（与传输路径无关）
- RelayEnvelope / RelayResult: 中继通道的请求与返回结构
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def _freeze_headers(headers: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(headers or {}))


def merge_headers(
    base: Mapping[str, str], overrides: Mapping[str, str] | None
) -> dict[str, str]:
    """合并 headers，header 名不区分大小写，overrides 中的同名项替换 base 中的项"""
    merged = dict(base)
    for name, value in (overrides or {}).items():
        lowered = name.lower()
        for existing in [key for key in merged if key.lower() == lowered]:
            del merged[existing]
        merged[name] = value
    return merged


@dataclass(frozen=True)
class RequestConfig:
    """
    调用方请求配置

    只识别 method / headers / body / timeout_ms 四个选项。
    body 为已序列化的字符串；需要序列化的对象请使用 serialize_body()。
    """

    method: HttpMethod | None = None
    headers: Mapping[str, str] | None = None
    body: str | None = None
    timeout_ms: int | None = None

    def with_overrides(self, **changes: Any) -> RequestConfig:
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class RequestDescriptor:
    """合并默认配置后的请求描述"""

    endpoint: str
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout_ms: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

    @classmethod
    def build(
        cls,
        endpoint: str,
        default_headers: Mapping[str, str],
        config: RequestConfig,
        default_timeout_ms: int | None = None,
    ) -> RequestDescriptor:
        """合并服务默认 headers 与调用方 headers，同名（不区分大小写）时调用方优先"""
        headers = merge_headers(default_headers, config.headers)
        timeout_ms = config.timeout_ms if config.timeout_ms is not None else default_timeout_ms
        return cls(
            endpoint=endpoint,
            method=config.method or HttpMethod.GET,
            headers=headers,
            body=config.body,
            timeout_ms=timeout_ms,
        )

    def replace(self, **changes: Any) -> RequestDescriptor:
        return dataclasses.replace(self, **changes)

    def with_headers(self, headers: Mapping[str, str]) -> RequestDescriptor:
        """返回追加/覆盖 headers 后的新描述"""
        return dataclasses.replace(self, headers=merge_headers(self.headers, headers))

    def __hash__(self) -> int:
        return hash(
            (
                self.endpoint,
                self.method,
                tuple(sorted(self.headers.items())),
                self.body,
                self.timeout_ms,
            )
        )


@dataclass(frozen=True)
class ResponseMetadata:
    """响应元数据，中继与直连两条路径形状一致"""

    status: int = 200
    ok: bool = True
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_headers(self.headers))


def serialize_body(data: Any) -> str | None:
    """将请求体序列化为 JSON 字符串；None 表示无请求体，字符串原样返回"""
    if data is None:
        return None
    if isinstance(data, str):
        return data
    if isinstance(data, BaseModel):
        return data.model_dump_json(exclude_none=True)
    return json.dumps(data, ensure_ascii=False, default=str)


# ============================================================================
# 中继通道契约
# ============================================================================


class RelayRequestConfig(BaseModel):
    method: HttpMethod
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    timeout: int | None = None


class RelayEnvelope(BaseModel):
    """提交给中继通道的请求信封: {service, config: {method, url, headers, body, timeout}}"""

    service: str
    config: RelayRequestConfig

    @classmethod
    def from_descriptor(cls, service: str, descriptor: RequestDescriptor) -> RelayEnvelope:
        return cls(
            service=service,
            config=RelayRequestConfig(
                method=descriptor.method,
                url=descriptor.endpoint,
                headers=dict(descriptor.headers),
                body=descriptor.body,
                timeout=descriptor.timeout_ms,
            ),
        )

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class RelayDetails(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status_code: int | None = Field(default=None, alias="statusCode")


class RelayResult(BaseModel):
    """中继通道返回结构: {success, data?, error?, details?: {statusCode?}}"""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    error: str | None = None
    details: RelayDetails | None = None


# ============================================================================
# 拦截器签名
# ============================================================================

RequestInterceptor = Callable[
    [RequestDescriptor], Union[RequestDescriptor, Awaitable[RequestDescriptor]]
]
ResponseInterceptor = Callable[[ResponseMetadata, Any], Union[Any, Awaitable[Any]]]


__all__ = [
    "HttpMethod",
    "RelayDetails",
    "RelayEnvelope",
    "RelayRequestConfig",
    "RelayResult",
    "RequestConfig",
    "RequestDescriptor",
    "RequestInterceptor",
    "ResponseInterceptor",
    "ResponseMetadata",
    "merge_headers",
    "serialize_body",
]
