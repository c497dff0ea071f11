"""
错误归一化工具函数
"""

from __future__ import annotations

import httpx

from src.core.exceptions import (
    ApiError,
    RequestAbortedError,
    RequestTimeoutError,
    TransportExceptionError,
)

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


def normalize_error(error: BaseException | object) -> ApiError:
    """
    将任意失败归一化为 ApiError

    - ApiError 原样返回，不做二次包装
    - 中止信号 / httpx 超时 -> RequestTimeoutError(-1, 408)
    - 带消息的异常 -> TransportExceptionError(原始消息, -1, 0)
    - 其他（无消息的异常或非异常值） -> TransportExceptionError("Unknown error occurred", -1, 0)
    """
    if isinstance(error, ApiError):
        return error

    if isinstance(error, (RequestAbortedError, httpx.TimeoutException)):
        return RequestTimeoutError()

    if isinstance(error, BaseException):
        message = str(error)
        if message.strip():
            return TransportExceptionError(message, -1, 0)

    return TransportExceptionError(UNKNOWN_ERROR_MESSAGE, -1, 0)


def extract_error_message(error: BaseException) -> str:
    """
    从异常中提取日志用的错误消息

    str 可能为空（如 httpx 部分异常），此时回退到 repr。
    """
    message = getattr(error, "message", None)
    if message and isinstance(message, str) and message.strip():
        return message
    return str(error) or repr(error)
