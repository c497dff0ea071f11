import httpx
import pytest
import pytest_asyncio

from src.clients.http_client import HTTPClientPool
from src.services.api import myapp as myapp_module
from src.services.api.myapp import MyAppApiService, close_myapp_api_service, get_myapp_api_service
from src.services.api.transports import DirectTransport


@pytest_asyncio.fixture(autouse=True)
async def _reset_pool():
    yield
    await HTTPClientPool.close_all()


@pytest.mark.asyncio
async def test_default_client_is_reused_until_closed() -> None:
    first = await HTTPClientPool.get_default_client_async()
    second = await HTTPClientPool.get_default_client_async()

    assert first is second

    await HTTPClientPool.close_all()

    assert first.is_closed
    third = await HTTPClientPool.get_default_client_async()
    assert third is not first


@pytest.mark.asyncio
async def test_close_all_is_idempotent() -> None:
    await HTTPClientPool.get_default_client_async()

    await HTTPClientPool.close_all()
    await HTTPClientPool.close_all()

    assert HTTPClientPool._default_client is None


@pytest.mark.asyncio
async def test_direct_transport_falls_back_to_shared_client() -> None:
    transport = DirectTransport()

    client = await transport._get_client()

    assert client is await HTTPClientPool.get_default_client_async()


@pytest.mark.asyncio
async def test_service_aclose_closes_pooled_client() -> None:
    service = MyAppApiService("http://testserver")
    client = await service.users.dispatcher.direct._get_client()

    await service.aclose()

    assert client.is_closed
    assert len({id(s.dispatcher.direct) for s in service.services}) == 1


@pytest.mark.asyncio
async def test_close_myapp_api_service_resets_singleton(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(myapp_module, "_myapp_api_service", None)
    service = get_myapp_api_service()
    client = await service.dispatcher.direct._get_client()

    await close_myapp_api_service()

    assert client.is_closed
    assert myapp_module._myapp_api_service is None
    assert get_myapp_api_service() is not service


@pytest.mark.asyncio
async def test_direct_transport_closes_injected_client_only() -> None:
    pooled = await HTTPClientPool.get_default_client_async()
    injected = httpx.AsyncClient()

    await DirectTransport(injected).aclose()

    assert injected.is_closed
    assert not pooled.is_closed
