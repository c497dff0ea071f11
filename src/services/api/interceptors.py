"""
拦截器链

请求拦截器与响应拦截器分别维护有序列表，按注册顺序依次 await 执行，
后一个拦截器看到的是前一个拦截器的结果。拦截器无法得知请求由哪条传输路径完成。
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union

from src.core.exceptions import BusinessFailureError
from src.core.logger import logger
from src.services.api.types import (
    RequestDescriptor,
    RequestInterceptor,
    ResponseInterceptor,
    ResponseMetadata,
)
from src.services.api.url import redact_url_for_log


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class InterceptorChain:
    """有序拦截器链（只追加，不支持移除）"""

    def __init__(self) -> None:
        self._request_interceptors: list[RequestInterceptor] = []
        self._response_interceptors: list[ResponseInterceptor] = []

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        self._request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        self._response_interceptors.append(interceptor)

    @property
    def request_interceptors(self) -> tuple[RequestInterceptor, ...]:
        return tuple(self._request_interceptors)

    @property
    def response_interceptors(self) -> tuple[ResponseInterceptor, ...]:
        return tuple(self._response_interceptors)

    async def apply_request(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        """依次执行请求拦截器；任一拦截器抛错则整个请求立即失败"""
        for interceptor in self._request_interceptors:
            descriptor = await _resolve(interceptor(descriptor))
            if not isinstance(descriptor, RequestDescriptor):
                raise TypeError(
                    f"请求拦截器 {getattr(interceptor, '__name__', interceptor)!r} "
                    f"必须返回 RequestDescriptor，实际返回 {type(descriptor).__name__}"
                )
        return descriptor

    async def apply_response(self, metadata: ResponseMetadata, payload: Any) -> Any:
        """依次执行响应拦截器，返回最终 payload"""
        for interceptor in self._response_interceptors:
            payload = await _resolve(interceptor(metadata, payload))
        return payload


# ============================================================================
# 内置拦截器
# ============================================================================

TokenProvider = Callable[[], Union[str, None, Awaitable[Union[str, None]]]]


def bearer_auth_interceptor(token_provider: TokenProvider) -> RequestInterceptor:
    """
    认证拦截器：为请求添加 Authorization: Bearer {token}

    token_provider 可以是同步或异步函数，返回空值时不修改请求。
    """

    async def _apply_auth(descriptor: RequestDescriptor) -> RequestDescriptor:
        token = await _resolve(token_provider())
        if not token:
            return descriptor
        return descriptor.with_headers({"Authorization": f"Bearer {token}"})

    return _apply_auth


def static_headers_interceptor(headers: Mapping[str, str]) -> RequestInterceptor:
    """为所有请求追加固定 headers"""
    fixed = dict(headers)

    def _apply_headers(descriptor: RequestDescriptor) -> RequestDescriptor:
        return descriptor.with_headers(fixed)

    return _apply_headers


def request_logging_interceptor() -> RequestInterceptor:
    """记录请求方法与路径（查询参数中的敏感值会被脱敏）"""

    def _log_request(descriptor: RequestDescriptor) -> RequestDescriptor:
        logger.debug(
            "[ApiRequest] {} {}",
            descriptor.method.value,
            redact_url_for_log(descriptor.endpoint),
        )
        return descriptor

    return _log_request


def unwrap_envelope_interceptor(success_code: int = 0) -> ResponseInterceptor:
    """
    解包后端统一响应信封 {code, message, data}

    - 非信封结构原样返回
    - code == success_code 时返回 data
    - 否则抛出 BusinessFailureError(message, code, 响应状态码)
    """

    def _unwrap(metadata: ResponseMetadata, payload: Any) -> Any:
        if not isinstance(payload, dict) or "code" not in payload or "data" not in payload:
            return payload

        code = payload.get("code")
        if code != success_code:
            message = payload.get("message") or "业务状态码表示失败"
            raise BusinessFailureError(
                str(message),
                code if isinstance(code, int) else -1,
                metadata.status,
                details={"payload": payload},
            )
        return payload["data"]

    return _unwrap


__all__ = [
    "InterceptorChain",
    "TokenProvider",
    "bearer_auth_interceptor",
    "request_logging_interceptor",
    "static_headers_interceptor",
    "unwrap_envelope_interceptor",
]
