import asyncio
import time
from typing import Any

import pytest

from api_test_helpers import BASE_URL, RecordingHandler, make_client, make_relay
from src.core.exceptions import ApiError, BusinessFailureError, TransportExceptionError
from src.services.api.base import BaseApiService
from src.services.api.interceptors import (
    InterceptorChain,
    bearer_auth_interceptor,
    request_logging_interceptor,
    static_headers_interceptor,
    unwrap_envelope_interceptor,
)
from src.services.api.transports import DirectTransport
from src.services.api.types import (
    HttpMethod,
    RequestConfig,
    RequestDescriptor,
    ResponseMetadata,
)


def _tag(name: str):
    def _interceptor(descriptor: RequestDescriptor) -> RequestDescriptor:
        trail = descriptor.headers.get("X-Trail", "")
        return descriptor.with_headers({"X-Trail": f"{trail}{name}"})

    return _interceptor


@pytest.mark.asyncio
async def test_request_interceptors_compose_in_registration_order() -> None:
    a, b = _tag("a"), _tag("b")
    relay = make_relay({"success": True, "data": {}})
    service = BaseApiService(BASE_URL, relay=relay)
    service.add_request_interceptor(a)
    service.add_request_interceptor(b)

    await service.get("/myapp/users")

    initial = RequestDescriptor.build("/myapp/users", service.default_headers, RequestConfig(method=HttpMethod.GET))
    expected = b(a(initial))
    sent = relay.proxy_request.await_args.args[0]["config"]
    assert sent["headers"] == dict(expected.headers)
    assert sent["headers"]["X-Trail"] == "ab"


@pytest.mark.asyncio
async def test_async_interceptors_are_awaited_sequentially() -> None:
    events: list[str] = []

    async def slow_auth(descriptor: RequestDescriptor) -> RequestDescriptor:
        events.append("auth:start")
        await asyncio.sleep(0.01)
        events.append("auth:end")
        return descriptor.with_headers({"Authorization": "Bearer t"})

    def signer(descriptor: RequestDescriptor) -> RequestDescriptor:
        events.append("sign")
        assert descriptor.headers["Authorization"] == "Bearer t"
        return descriptor.with_headers({"X-Signature": "sig"})

    chain = InterceptorChain()
    chain.add_request_interceptor(slow_auth)
    chain.add_request_interceptor(signer)

    result = await chain.apply_request(RequestDescriptor(endpoint="/x"))

    assert events == ["auth:start", "auth:end", "sign"]
    assert result.headers["X-Signature"] == "sig"


@pytest.mark.asyncio
async def test_failing_request_interceptor_aborts_before_dispatch() -> None:
    relay = make_relay({"success": True, "data": {}})
    handler = RecordingHandler(200, {})
    service = BaseApiService(
        BASE_URL, relay=relay, direct=DirectTransport(make_client(handler))
    )
    boom = RuntimeError("token store locked")

    def failing(descriptor: RequestDescriptor) -> RequestDescriptor:
        raise boom

    service.add_request_interceptor(failing)

    with pytest.raises(RuntimeError) as exc_info:
        await service.get("/myapp/users")

    assert exc_info.value is boom
    assert relay.proxy_request.await_count == 0
    assert handler.requests == []


@pytest.mark.asyncio
async def test_request_interceptor_must_return_descriptor() -> None:
    chain = InterceptorChain()
    chain.add_request_interceptor(lambda descriptor: None)

    with pytest.raises(TypeError):
        await chain.apply_request(RequestDescriptor(endpoint="/x"))


@pytest.mark.asyncio
async def test_response_interceptors_unwrap_then_stamp() -> None:
    relay = make_relay({"success": True, "data": {"data": {"id": 2}}})
    service = BaseApiService(BASE_URL, relay=relay)

    def r1(metadata: ResponseMetadata, payload: Any) -> Any:
        return payload["data"]

    async def r2(metadata: ResponseMetadata, payload: Any) -> Any:
        return {**payload, "receivedAt": time.time()}

    service.add_response_interceptor(r1)
    service.add_response_interceptor(r2)

    result = await service.get("/myapp/users/2")

    assert result["id"] == 2
    assert isinstance(result["receivedAt"], float)
    assert set(result) == {"id", "receivedAt"}


@pytest.mark.asyncio
async def test_response_interceptors_see_same_metadata_shape_on_both_paths() -> None:
    seen: list[ResponseMetadata] = []

    def record(metadata: ResponseMetadata, payload: Any) -> Any:
        seen.append(metadata)
        return payload

    relay_service = BaseApiService(BASE_URL, relay=make_relay({"success": True, "data": 1}))
    direct_service = BaseApiService(
        BASE_URL, relay=None, direct=DirectTransport(make_client(RecordingHandler(200, 1)))
    )
    for service in (relay_service, direct_service):
        service.add_response_interceptor(record)
        assert await service.get("/myapp/users") == 1

    assert [type(m) for m in seen] == [ResponseMetadata, ResponseMetadata]
    assert all(m.ok is True and m.status == 200 for m in seen)


@pytest.mark.asyncio
async def test_failing_response_interceptor_is_normalized() -> None:
    service = BaseApiService(BASE_URL, relay=make_relay({"success": True, "data": {}}))

    def broken(metadata: ResponseMetadata, payload: Any) -> Any:
        raise KeyError("missing")

    service.add_response_interceptor(broken)

    with pytest.raises(TransportExceptionError) as exc_info:
        await service.get("/myapp/users")

    assert exc_info.value.code == -1
    assert exc_info.value.http_status == 0
    assert "missing" in exc_info.value.message


@pytest.mark.asyncio
async def test_api_error_from_response_interceptor_is_not_rewrapped() -> None:
    service = BaseApiService(BASE_URL, relay=make_relay({"success": True, "data": {}}))
    original = ApiError("denied", 403, 403)

    def deny(metadata: ResponseMetadata, payload: Any) -> Any:
        raise original

    service.add_response_interceptor(deny)

    with pytest.raises(ApiError) as exc_info:
        await service.get("/myapp/users")

    assert exc_info.value is original


@pytest.mark.asyncio
async def test_bearer_auth_interceptor_uses_async_token_provider() -> None:
    async def token() -> str:
        return "abc"

    result = await bearer_auth_interceptor(token)(RequestDescriptor(endpoint="/x"))

    assert result.headers["Authorization"] == "Bearer abc"


@pytest.mark.asyncio
async def test_bearer_auth_interceptor_skips_empty_token() -> None:
    descriptor = RequestDescriptor(endpoint="/x")

    result = await bearer_auth_interceptor(lambda: None)(descriptor)

    assert result is descriptor
    assert "Authorization" not in result.headers


def test_static_headers_interceptor_overrides_existing() -> None:
    descriptor = RequestDescriptor(endpoint="/x", headers={"Accept-Language": "en"})

    result = static_headers_interceptor({"Accept-Language": "zh-CN"})(descriptor)

    assert result.headers["Accept-Language"] == "zh-CN"
    assert descriptor.headers["Accept-Language"] == "en"


def test_unwrap_envelope_interceptor() -> None:
    unwrap = unwrap_envelope_interceptor()
    metadata = ResponseMetadata(status=200)

    assert unwrap(metadata, {"code": 0, "message": "ok", "data": [1]}) == [1]
    assert unwrap(metadata, [1, 2]) == [1, 2]
    assert unwrap(metadata, {"id": 1}) == {"id": 1}

    with pytest.raises(BusinessFailureError) as exc_info:
        unwrap(metadata, {"code": 40001, "message": "用户名已存在", "data": None})

    assert exc_info.value.code == 40001
    assert exc_info.value.http_status == 200
    assert exc_info.value.message == "用户名已存在"


def test_request_logging_interceptor_returns_descriptor_unchanged() -> None:
    descriptor = RequestDescriptor(endpoint="/myapp/users?token=secret")

    assert request_logging_interceptor()(descriptor) is descriptor
