from unittest.mock import Mock

import pytest

from passer.crypto.aes_gcm import AesGcmEngine
from passer.crypto.key_codec import (
    RESOURCE_ID_LENGTH,
    KeyCodec,
    build_quick_link,
    build_stepped_link,
    split_quick_link,
)
from passer.exceptions import InvalidKeyError, InvalidLinkError
from passer.models.link import LinkKind
from passer.tests.conftest import WEB_URL
from passer.tests.utils.transports import make_resource_id


@pytest.fixture
def spy_engine() -> Mock:
    engine = Mock(wraps=AesGcmEngine())
    engine.key_size = AesGcmEngine.key_size
    engine.key_text_length = AesGcmEngine.key_text_length
    return engine


def test_generate_returns_distinct_keys(codec: KeyCodec) -> None:
    first = codec.generate()
    second = codec.generate()

    assert len(codec.to_text(first)) == codec.key_text_length
    assert codec.to_text(first) != codec.to_text(second)


def test_from_text_round_trip_decrypts_identically(codec: KeyCodec) -> None:
    key = codec.generate()
    ciphertext = key.encrypt("note", "hidden")

    restored = codec.from_text(codec.to_text(key))

    assert restored.decrypt(ciphertext).text == "hidden"


@pytest.mark.parametrize("length", [0, 1, 42, 44, 59])
def test_from_text_rejects_wrong_length_without_engine(spy_engine: Mock, length: int) -> None:
    codec = KeyCodec(spy_engine)

    with pytest.raises(InvalidKeyError):
        codec.from_text("A" * length)

    spy_engine.key_from_text.assert_not_called()


def test_from_text_passes_canonical_length_to_engine(spy_engine: Mock) -> None:
    codec = KeyCodec(spy_engine)
    text = codec.to_text(codec.generate())

    codec.from_text(text)

    spy_engine.key_from_text.assert_called_once_with(text)


def test_is_well_formed(codec: KeyCodec) -> None:
    text = codec.to_text(codec.generate())

    assert codec.is_well_formed(text)
    assert not codec.is_well_formed(text[:-1])
    assert not codec.is_well_formed("+" + text[1:])


def test_split_quick_link_inverts_build(codec: KeyCodec) -> None:
    resource_id = make_resource_id()
    key_text = codec.to_text(codec.generate())

    combined = build_quick_link(resource_id, key_text)
    descriptor = split_quick_link(combined, codec.key_text_length)

    assert len(combined) == RESOURCE_ID_LENGTH + codec.key_text_length
    assert descriptor.resource_id == resource_id
    assert descriptor.key_text == key_text
    assert descriptor.kind is LinkKind.QUICK


@pytest.mark.parametrize("length", [0, 43, 85, 87, 102])
def test_split_quick_link_rejects_wrong_length(codec: KeyCodec, length: int) -> None:
    with pytest.raises(InvalidLinkError) as excinfo:
        split_quick_link("A" * length, codec.key_text_length)

    assert excinfo.value.length == length


def test_split_quick_link_rejects_unsafe_characters(codec: KeyCodec) -> None:
    combined = "A" * 42 + "/" + "B" * codec.key_text_length

    with pytest.raises(InvalidLinkError):
        split_quick_link(combined, codec.key_text_length)


def test_build_stepped_link_validates_resource_id() -> None:
    resource_id = make_resource_id()

    assert build_stepped_link(resource_id) == resource_id
    with pytest.raises(InvalidLinkError):
        build_stepped_link(resource_id[:-1])
    with pytest.raises(InvalidLinkError):
        build_stepped_link("?" * RESOURCE_ID_LENGTH)


def test_build_quick_link_rejects_unsafe_key_text() -> None:
    with pytest.raises(InvalidKeyError):
        build_quick_link(make_resource_id(), "a/b")


def test_urls_use_route_prefixes(codec: KeyCodec) -> None:
    resource_id = make_resource_id()
    key_text = codec.to_text(codec.generate())

    assert codec.stepped_url(resource_id) == f"{WEB_URL}/s/{resource_id}"
    assert codec.quick_url(resource_id, key_text) == f"{WEB_URL}/q/{resource_id}{key_text}"


def test_parse_full_urls(codec: KeyCodec) -> None:
    resource_id = make_resource_id()
    key = codec.generate()

    quick = codec.parse(codec.quick_url(resource_id, codec.to_text(key)))
    stepped = codec.parse(codec.stepped_url(resource_id))

    assert quick.resource_id == resource_id
    assert quick.key_text == codec.to_text(key)
    assert stepped.resource_id == resource_id
    assert stepped.key_text is None
    assert stepped.kind is LinkKind.STEPPED


def test_parse_bare_segments_by_length(codec: KeyCodec) -> None:
    resource_id = make_resource_id()
    key_text = codec.to_text(codec.generate())

    assert codec.parse(resource_id).key_text is None
    assert codec.parse(resource_id + key_text).key_text == key_text


@pytest.mark.parametrize(
    "link",
    [
        "",
        "   ",
        "https://passer.test/",
        "short",
        f"https://passer.test/x/{'A' * 43}",
        f"https://passer.test/s/{'A' * 86}",
        f"https://passer.test/q/{'A' * 43}",
    ],
)
def test_parse_rejects_malformed_links(codec: KeyCodec, link: str) -> None:
    with pytest.raises(InvalidLinkError):
        codec.parse(link)
