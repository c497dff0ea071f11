"""
基础 API 服务

提供通用的 HTTP 请求方法、拦截器注册与错误归一化，
各业务服务（用户、角色、权限）只声明 endpoint 与请求体。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.config import config as app_config
from src.core.error_utils import normalize_error
from src.core.logger import logger
from src.services.api.dispatcher import RequestDispatcher
from src.services.api.interceptors import InterceptorChain
from src.services.api.transports import DirectTransport, RelayChannel
from src.services.api.types import (
    HttpMethod,
    RequestConfig,
    RequestDescriptor,
    RequestInterceptor,
    ResponseInterceptor,
    serialize_body,
)

DEFAULT_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}


class BaseApiService:
    """
    基础 API 服务类

    base_url / default_headers 在构造时确定，之后只读；
    拦截器应在应用启动阶段注册，不应与进行中的请求并发修改。
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        relay: RelayChannel | None = None,
        direct: DirectTransport | None = None,
        default_headers: Mapping[str, str] | None = None,
        default_timeout_ms: int | None = None,
        service_name: str | None = None,
    ) -> None:
        self.base_url = (base_url or app_config.api_base_url).rstrip("/")
        self.default_headers: Mapping[str, str] = dict(
            default_headers if default_headers is not None else DEFAULT_HEADERS
        )
        self.default_timeout_ms = (
            default_timeout_ms if default_timeout_ms is not None else app_config.default_timeout_ms
        )
        self.interceptors = InterceptorChain()
        self.dispatcher = RequestDispatcher(
            self.base_url,
            relay=relay,
            direct=direct,
            service_name=service_name,
        )

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        """添加请求拦截器"""
        self.interceptors.add_request_interceptor(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        """添加响应拦截器"""
        self.interceptors.add_response_interceptor(interceptor)

    async def aclose(self) -> None:
        """释放直连传输占用的连接"""
        await self.dispatcher.direct.aclose()

    async def request(self, endpoint: str, config: RequestConfig | None = None) -> Any:
        """
        通用请求方法

        请求拦截器抛出的错误原样传播（请求不会被分发）；
        分发与响应拦截阶段的任何失败都归一化为 ApiError。
        """
        descriptor = RequestDescriptor.build(
            endpoint,
            self.default_headers,
            config or RequestConfig(),
            self.default_timeout_ms,
        )
        descriptor = await self.interceptors.apply_request(descriptor)

        try:
            result = await self.dispatcher.dispatch(descriptor)
            return await self.interceptors.apply_response(result.metadata, result.payload)
        except Exception as e:
            error = normalize_error(e)
            logger.error(
                "API request failed: {} {} -> {!r}",
                descriptor.method.value,
                descriptor.endpoint,
                error,
            )
            if error is e:
                raise
            raise error from e

    async def get(self, endpoint: str, config: RequestConfig | None = None) -> Any:
        """GET 请求"""
        return await self.request(endpoint, self._with_method(config, HttpMethod.GET))

    async def post(
        self, endpoint: str, data: Any = None, config: RequestConfig | None = None
    ) -> Any:
        """POST 请求"""
        return await self.request(endpoint, self._with_body(config, HttpMethod.POST, data))

    async def put(
        self, endpoint: str, data: Any = None, config: RequestConfig | None = None
    ) -> Any:
        """PUT 请求"""
        return await self.request(endpoint, self._with_body(config, HttpMethod.PUT, data))

    async def delete(
        self, endpoint: str, data: Any = None, config: RequestConfig | None = None
    ) -> Any:
        """DELETE 请求（部分关联移除接口需要请求体）"""
        if data is None:
            return await self.request(endpoint, self._with_method(config, HttpMethod.DELETE))
        return await self.request(endpoint, self._with_body(config, HttpMethod.DELETE, data))

    async def patch(
        self, endpoint: str, data: Any = None, config: RequestConfig | None = None
    ) -> Any:
        """PATCH 请求"""
        return await self.request(endpoint, self._with_body(config, HttpMethod.PATCH, data))

    @staticmethod
    def _with_method(config: RequestConfig | None, method: HttpMethod) -> RequestConfig:
        return (config or RequestConfig()).with_overrides(method=method)

    @staticmethod
    def _with_body(config: RequestConfig | None, method: HttpMethod, data: Any) -> RequestConfig:
        return (config or RequestConfig()).with_overrides(
            method=method, body=serialize_body(data)
        )


__all__ = ["BaseApiService", "DEFAULT_HEADERS"]
