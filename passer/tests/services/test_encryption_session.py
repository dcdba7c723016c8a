import asyncio
import os

import pytest

from passer.api.http_client import AsyncHttpClient
from passer.config import PasserConfig
from passer.core import pack_codec
from passer.crypto.key_codec import KeyCodec
from passer.exceptions import SessionLockedError
from passer.models.alert import Alert, AlertKind
from passer.models.pack import PlainItem
from passer.models.upload import TTL, UploadResult
from passer.services.encryption_session import EncryptionSession
from passer.services.size_budget import SizeBudget
from passer.tests.utils.items import SlowItem
from passer.tests.utils.transports import GatedTransport, MockTransport, OneTimeStoreTransport


@pytest.fixture
def session(store_http: AsyncHttpClient, codec: KeyCodec, budget: SizeBudget) -> EncryptionSession:
    return EncryptionSession(store_http, codec, budget, default_ttl=TTL.ONE_HOUR)


@pytest.mark.asyncio
async def test_add_appends_packs_in_order(session: EncryptionSession) -> None:
    await session.add_text("first")
    alerts = await session.add(
        [PlainItem.from_bytes("a.bin", b"a"), PlainItem.from_bytes("b.bin", b"b")]
    )

    assert alerts == ()
    assert [pack.name for pack in session.packs] == ["Text", "a.bin", "b.bin"]
    assert session.total_size == sum(pack.size for pack in session.packs)
    assert session.can_upload


@pytest.mark.asyncio
async def test_add_reports_per_item_alerts(session: EncryptionSession) -> None:
    alerts = await session.add(
        [PlainItem.from_bytes("empty", b""), PlainItem.from_bytes("ok", b"data")]
    )

    assert [alert.kind for alert in alerts] == [AlertKind.TOO_SMALL]
    assert [pack.name for pack in session.packs] == ["ok"]
    assert session.alerts == alerts


@pytest.mark.asyncio
async def test_aggregate_overflow_blocks_upload_until_removal(
    store_http: AsyncHttpClient, codec: KeyCodec
) -> None:
    budget = SizeBudget(max_item_size=200, max_total_size=300)
    session = EncryptionSession(store_http, codec, budget)

    await session.add([PlainItem.from_bytes(f"f{i}", os.urandom(150)) for i in range(2)])

    assert [alert.kind for alert in session.alerts] == [AlertKind.TOO_MUCH_DATA]
    assert not session.can_upload
    assert session.usage_percent > 100

    session.remove(-1)

    assert len(session.packs) == 1
    assert session.can_upload


@pytest.mark.asyncio
async def test_remove_out_of_range_raises(session: EncryptionSession) -> None:
    await session.add_text("only")

    with pytest.raises(IndexError):
        session.remove(1)
    assert session.remove(0).name == "Text"
    assert session.packs == ()


@pytest.mark.asyncio
async def test_upload_locks_session(
    session: EncryptionSession, store_transport: OneTimeStoreTransport
) -> None:
    await session.add_text("secret")

    result = await session.upload()

    assert isinstance(result, UploadResult)
    assert result.ttl is TTL.ONE_HOUR
    assert session.uploaded
    assert session.result is result
    assert session.alerts == (Alert.upload_succeeded(),)
    assert not session.can_upload
    assert store_transport.ttls[result.resource_id] == "1h"
    with pytest.raises(SessionLockedError):
        await session.add_text("more")
    with pytest.raises(SessionLockedError):
        await session.upload()


@pytest.mark.asyncio
async def test_reset_unlocks_with_a_fresh_key(session: EncryptionSession) -> None:
    await session.add_text("secret")
    first = await session.upload(TTL.ONE_WEEK)
    assert isinstance(first, UploadResult)

    session.reset()

    assert not session.uploaded
    assert session.packs == ()
    assert session.alerts == ()
    await session.add_text("again")
    second = await session.upload()
    assert isinstance(second, UploadResult)
    assert second.key_text != first.key_text


@pytest.mark.asyncio
async def test_failed_upload_keeps_packs(
    mock_http: AsyncHttpClient, mock_transport: MockTransport, codec: KeyCodec, budget: SizeBudget
) -> None:
    session = EncryptionSession(mock_http, codec, budget)
    await session.add_text("secret")
    mock_transport.add_response(status_code=500)

    result = await session.upload()

    assert result == Alert.upload_failed()
    assert session.alerts == (result,)
    assert len(session.packs) == 1
    assert session.can_upload


@pytest.mark.asyncio
async def test_close_is_idempotent_and_final(session: EncryptionSession) -> None:
    await session.add_text("secret")

    session.close()
    session.close()

    assert session.packs == ()
    assert not session.can_upload
    with pytest.raises(SessionLockedError):
        await session.add_text("more")
    with pytest.raises(SessionLockedError):
        session.reset()
    with pytest.raises(SessionLockedError):
        await session.upload()


@pytest.mark.asyncio
async def test_session_is_locked_while_upload_is_in_flight(
    config: PasserConfig, codec: KeyCodec, budget: SizeBudget
) -> None:
    store = OneTimeStoreTransport()
    gated = GatedTransport(store)

    async with AsyncHttpClient(config, transport=gated) as http:
        session = EncryptionSession(http, codec, budget)
        await session.add_text("first")
        upload = asyncio.create_task(session.upload())
        await gated.entered.wait()

        assert not session.can_upload
        with pytest.raises(SessionLockedError, match="in progress"):
            await session.add_text("second")
        with pytest.raises(SessionLockedError, match="in progress"):
            session.remove(0)
        with pytest.raises(SessionLockedError, match="in progress"):
            session.reset()

        gated.gate.set()
        result = await upload

    assert isinstance(result, UploadResult)
    assert session.uploaded
    assert len(session.packs) == 1
    assert pack_codec.decode(store.secrets[result.resource_id]) == [session.packs[0].ciphertext]


@pytest.mark.asyncio
async def test_batch_finishing_after_upload_started_is_refused(
    config: PasserConfig, codec: KeyCodec, budget: SizeBudget
) -> None:
    gated = GatedTransport(OneTimeStoreTransport())

    async with AsyncHttpClient(config, transport=gated) as http:
        session = EncryptionSession(http, codec, budget)
        await session.add_text("first")
        slow = SlowItem(name="slow", size=4, source=b"late")
        pending_add = asyncio.create_task(session.add([slow]))
        await slow.reading.wait()

        upload = asyncio.create_task(session.upload())
        await gated.entered.wait()
        slow.release.set()

        with pytest.raises(SessionLockedError):
            await pending_add
        gated.gate.set()
        await upload

    assert [pack.name for pack in session.packs] == ["Text"]


@pytest.mark.asyncio
async def test_close_during_upload_still_returns_links(
    config: PasserConfig, codec: KeyCodec, budget: SizeBudget
) -> None:
    gated = GatedTransport(OneTimeStoreTransport())

    async with AsyncHttpClient(config, transport=gated) as http:
        session = EncryptionSession(http, codec, budget)
        await session.add_text("first")
        upload = asyncio.create_task(session.upload())
        await gated.entered.wait()

        session.close()
        gated.gate.set()
        result = await upload

    assert isinstance(result, UploadResult)
    assert len(result.key_text) == codec.key_text_length
    assert result.quick_link.endswith(result.resource_id + result.key_text)
