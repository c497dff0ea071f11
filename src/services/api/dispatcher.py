"""
双通道请求分发器

先尝试特权中继通道，中继不可用时回退到直连请求：

1. 中继返回 success=True  -> 使用中继数据
2. 中继返回 success=False -> 抛出 RelayFailureError，不回退
3. 中继不可用（未注入、调用抛错、返回结构不符合契约）-> 记录警告后直连，最多回退一次

两条路径都产出相同形状的 ResponseMetadata，调用方与拦截器无需关心请求走了哪条路径。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from src.config import config
from src.core.error_utils import extract_error_message
from src.core.exceptions import HttpFailureError, RelayFailureError, RelayUnavailableError
from src.core.logger import logger
from src.services.api.transports import DirectTransport, RelayChannel, parse_response_body
from src.services.api.types import (
    RelayEnvelope,
    RelayResult,
    RequestDescriptor,
    ResponseMetadata,
)
from src.services.api.url import build_request_url, redact_url_for_log

PROXY_FAILED_MESSAGE = "Proxy request failed"


class RelayOutcome(str, Enum):
    """中继尝试结果"""

    DELIVERED = "delivered"  # 中继成功返回数据
    REJECTED = "rejected"  # 中继返回结构化失败（终止，不回退）
    UNAVAILABLE = "unavailable"  # 中继不可用，需要回退直连


class TransportKind(str, Enum):
    RELAY = "relay"
    DIRECT = "direct"


@dataclass(frozen=True)
class RelayAttempt:
    outcome: RelayOutcome
    result: RelayResult | None = None
    error: BaseException | None = None


@dataclass(frozen=True)
class DispatchResult:
    """分发结果；transport 仅用于日志与诊断，不会传给拦截器"""

    metadata: ResponseMetadata
    payload: Any
    transport: TransportKind


class RequestDispatcher:
    """
    请求分发器

    中继通道通过构造参数注入（None 表示宿主未提供中继，直接走直连）。
    """

    def __init__(
        self,
        base_url: str,
        relay: RelayChannel | None = None,
        direct: DirectTransport | None = None,
        service_name: str | None = None,
    ) -> None:
        self.base_url = base_url
        self.relay = relay
        self.direct = direct or DirectTransport()
        self.service_name = service_name or config.relay_service_name

    async def dispatch(self, descriptor: RequestDescriptor) -> DispatchResult:
        attempt = await self.attempt_relay(descriptor)

        if attempt.outcome is RelayOutcome.DELIVERED:
            return self._relay_response(attempt.result)

        if attempt.outcome is RelayOutcome.REJECTED:
            raise self._relay_failure(attempt.result)

        log = logger.warning if self.relay is not None else logger.debug
        log(
            "IPC 中继不可用，回退到直连请求: {} {} ({})",
            descriptor.method.value,
            redact_url_for_log(descriptor.endpoint),
            extract_error_message(attempt.error) if attempt.error else "unknown",
        )
        return await self.dispatch_direct(descriptor)

    async def attempt_relay(self, descriptor: RequestDescriptor) -> RelayAttempt:
        """
        提交中继请求并归类结果

        中继调用本身抛出的异常在此处被捕获并转为 UNAVAILABLE，不向上传播。
        """
        if self.relay is None:
            return RelayAttempt(
                RelayOutcome.UNAVAILABLE,
                error=RelayUnavailableError("relay channel is not configured"),
            )

        try:
            envelope = RelayEnvelope.from_descriptor(self.service_name, descriptor)
            raw_result = await self.relay.proxy_request(envelope.to_params())
            result = RelayResult.model_validate(raw_result)
        except Exception as e:
            return RelayAttempt(RelayOutcome.UNAVAILABLE, error=e)

        if result.success:
            return RelayAttempt(RelayOutcome.DELIVERED, result=result)
        return RelayAttempt(RelayOutcome.REJECTED, result=result)

    async def dispatch_direct(self, descriptor: RequestDescriptor) -> DispatchResult:
        """直连请求；设置了 timeout_ms 时受截止时间约束"""
        url = build_request_url(self.base_url, descriptor.endpoint)
        logger.debug("[Direct] {} {}", descriptor.method.value, redact_url_for_log(url))

        response = await self.direct.send_with_deadline(url, descriptor)

        if not response.is_success:
            raise HttpFailureError(
                f"HTTP error! status: {response.status_code}",
                0,
                response.status_code,
            )

        payload = parse_response_body(response)
        metadata = ResponseMetadata(
            status=response.status_code,
            ok=True,
            headers=dict(response.headers),
        )
        return DispatchResult(metadata, payload, TransportKind.DIRECT)

    @staticmethod
    def _relay_response(result: RelayResult | None) -> DispatchResult:
        assert result is not None
        status = 200
        if result.details is not None and result.details.status_code:
            status = result.details.status_code
        return DispatchResult(
            ResponseMetadata(status=status, ok=True, headers={}),
            result.data,
            TransportKind.RELAY,
        )

    @staticmethod
    def _relay_failure(result: RelayResult | None) -> RelayFailureError:
        assert result is not None
        status_code = 0
        if result.details is not None and result.details.status_code:
            status_code = result.details.status_code
        return RelayFailureError(
            result.error or PROXY_FAILED_MESSAGE,
            0,
            status_code,
            details=result.details.model_dump(by_alias=True) if result.details else None,
        )


__all__ = [
    "DispatchResult",
    "PROXY_FAILED_MESSAGE",
    "RelayAttempt",
    "RelayOutcome",
    "RequestDispatcher",
    "TransportKind",
]
