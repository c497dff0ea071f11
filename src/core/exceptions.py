"""
API 错误体系

所有请求失败最终都以 ApiError（或其子类）的形式抛给调用方：

| 类型                  | code | http_status        |
|-----------------------|------|--------------------|
| RelayFailureError     | 0    | 中继提供的状态码或 0 |
| HttpFailureError      | 0    | 实际 HTTP 状态码    |
| RequestTimeoutError   | -1   | 408                |
| TransportExceptionError | -1 | 0                  |
| BusinessFailureError  | 业务 code | 响应状态码      |
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ApiErrorKind(str, Enum):
    """错误分类"""

    RELAY_FAILURE = "relay_failure"  # 中继通道返回结构化失败
    HTTP_FAILURE = "http_failure"  # 直连请求收到非 2xx 响应
    REQUEST_TIMEOUT = "request_timeout"  # 直连请求超过截止时间被中止
    TRANSPORT_EXCEPTION = "transport_exception"  # 其他任何异常
    BUSINESS_FAILURE = "business_failure"  # 响应信封中的业务 code 表示失败


class ApiError(Exception):
    """请求失败的统一错误类型"""

    kind: ApiErrorKind = ApiErrorKind.TRANSPORT_EXCEPTION

    def __init__(
        self,
        message: str,
        code: int = 0,
        http_status: int = 0,
        *,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """转换为字典（用于 UI 展示或日志）"""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "code": self.code,
            "http_status": self.http_status,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"code={self.code}, http_status={self.http_status})"
        )


class RelayFailureError(ApiError):
    kind = ApiErrorKind.RELAY_FAILURE


class HttpFailureError(ApiError):
    kind = ApiErrorKind.HTTP_FAILURE


class RequestTimeoutError(ApiError):
    kind = ApiErrorKind.REQUEST_TIMEOUT

    def __init__(self, message: str = "Request timeout", **kwargs: Any):
        super().__init__(message, -1, 408, **kwargs)


class TransportExceptionError(ApiError):
    kind = ApiErrorKind.TRANSPORT_EXCEPTION


class BusinessFailureError(ApiError):
    kind = ApiErrorKind.BUSINESS_FAILURE


class RequestAbortedError(RuntimeError):
    """直连请求被中止信号打断（由超时控制器抛出，随后映射为 RequestTimeoutError）"""

    def __init__(self, reason: str = "deadline exceeded"):
        super().__init__(reason)
        self.reason = reason


class RelayUnavailableError(RuntimeError):
    """中继通道不可用（未注入或宿主未提供 IPC 桥）"""


__all__ = [
    "ApiError",
    "ApiErrorKind",
    "BusinessFailureError",
    "HttpFailureError",
    "RelayFailureError",
    "RelayUnavailableError",
    "RequestAbortedError",
    "RequestTimeoutError",
    "TransportExceptionError",
]
