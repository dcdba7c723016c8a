from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from passer.api.http_client import AsyncHttpClient
from passer.config import PasserConfig
from passer.crypto.aes_gcm import AesGcmEngine
from passer.crypto.key_codec import KeyCodec
from passer.services.size_budget import SizeBudget
from passer.tests.utils.transports import MockTransport, OneTimeStoreTransport

API_URL = "https://passer.test/api/"
WEB_URL = "https://passer.test"


@pytest.fixture
def config() -> PasserConfig:
    return PasserConfig(api_url=API_URL, web_url=WEB_URL)


@pytest.fixture
def engine() -> AesGcmEngine:
    return AesGcmEngine()


@pytest.fixture
def codec(engine: AesGcmEngine) -> KeyCodec:
    return KeyCodec(engine, WEB_URL)


@pytest.fixture
def budget() -> SizeBudget:
    return SizeBudget(max_item_size=1024, max_total_size=4096)


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def store_transport() -> OneTimeStoreTransport:
    return OneTimeStoreTransport()


@pytest_asyncio.fixture
async def store_http(
    config: PasserConfig, store_transport: OneTimeStoreTransport
) -> AsyncIterator[AsyncHttpClient]:
    async with AsyncHttpClient(config, transport=store_transport) as http:
        yield http


@pytest_asyncio.fixture
async def mock_http(
    config: PasserConfig, mock_transport: MockTransport
) -> AsyncIterator[AsyncHttpClient]:
    async with AsyncHttpClient(config, transport=mock_transport) as http:
        yield http
