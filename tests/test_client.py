import aiohttp
import pytest

from pyappointmentmonitor import Client
from pyappointmentmonitor.publisher import PushoverPublisher
from pyappointmentmonitor.service import TtpService


@pytest.mark.asyncio
async def test_client_does_not_close_injected_session() -> None:
    session = aiohttp.ClientSession()
    client = Client(session=session)
    await client.aclose()

    assert session.closed is False
    await session.close()


@pytest.mark.asyncio
async def test_client_closes_owned_session() -> None:
    client = Client()
    client.get_service()
    session = client._session
    assert session is not None
    await client.aclose()
    assert session.closed is True
    assert client._session is None


@pytest.mark.asyncio
async def test_client_builds_service_and_publishers() -> None:
    async with Client(endpoint="https://example/api", pushover_token="app") as client:
        service = client.get_service()
        publishers = client.get_publishers()
    assert isinstance(service, TtpService)
    assert service.endpoint == "https://example/api"
    assert set(publishers) == {"log", "webhook", "pushover"}
    assert isinstance(publishers["pushover"], PushoverPublisher)
    assert publishers["pushover"]._token == "app"
