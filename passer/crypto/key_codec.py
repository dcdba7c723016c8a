"""
Key generation and shareable link composition.

Link segments are split by fixed offsets computed from known lengths, never by
scanning for a delimiter:

    stepped: ``<resource_id>``                (43 characters)
    quick:   ``<resource_id><key_text>``      (43 + key text length)
"""

import re
import secrets
from urllib.parse import urlsplit

import structlog

from passer.crypto.protocol import CryptoEngine, SecretKey
from passer.exceptions import InvalidKeyError, InvalidLinkError
from passer.models.link import LinkDescriptor, LinkKind

logger = structlog.get_logger(__name__)

RESOURCE_ID_LENGTH = 43
_URL_SAFE = re.compile(r"[A-Za-z0-9_-]*")


def _is_url_safe(text: str) -> bool:
    return _URL_SAFE.fullmatch(text) is not None


def build_stepped_link(resource_id: str) -> str:
    """Return the path segment of a stepped link."""
    if len(resource_id) != RESOURCE_ID_LENGTH or not _is_url_safe(resource_id):
        msg = "Resource id has an unexpected shape"
        raise InvalidLinkError(msg, length=len(resource_id))
    return resource_id


def build_quick_link(resource_id: str, key_text: str) -> str:
    """Return the path segment of a quick link (identifier followed by key)."""
    if not _is_url_safe(key_text):
        raise InvalidKeyError("Key text is not URL-safe")
    return build_stepped_link(resource_id) + key_text


def split_quick_link(combined: str, key_text_length: int) -> LinkDescriptor:
    """
    Exact inverse of ``build_quick_link``.

    Args:
        combined: Quick link path segment.
        key_text_length: Canonical key text length of the engine in use.

    Raises:
        InvalidLinkError: If the segment length or alphabet is wrong.
    """
    expected = RESOURCE_ID_LENGTH + key_text_length
    if len(combined) != expected or not _is_url_safe(combined):
        msg = f"Quick link must be {expected} URL-safe characters"
        raise InvalidLinkError(msg, length=len(combined))
    return LinkDescriptor(
        resource_id=combined[:RESOURCE_ID_LENGTH],
        key_text=combined[RESOURCE_ID_LENGTH:],
    )


class KeyCodec:
    """
    Generates keys and converts between keys, text and links.

    Args:
        engine: Crypto engine that owns the key format.
        web_url: Base URL used when composing full links.
    """

    def __init__(self, engine: CryptoEngine, web_url: str = "") -> None:
        self._engine = engine
        self._web_url = web_url.rstrip("/")

    @property
    def key_text_length(self) -> int:
        return self._engine.key_text_length

    @property
    def quick_length(self) -> int:
        return RESOURCE_ID_LENGTH + self._engine.key_text_length

    def generate(self) -> SecretKey:
        """Create a key from cryptographically strong randomness."""
        return self._engine.generate_key(secrets.token_bytes(self._engine.key_size))

    @staticmethod
    def to_text(key: SecretKey) -> str:
        return key.to_text()

    def from_text(self, text: str) -> SecretKey:
        """
        Parse key text.

        Text of the wrong length is rejected before the engine sees it.

        Raises:
            InvalidKeyError: If the text is not a valid key.
        """
        if len(text) != self._engine.key_text_length:
            msg = f"Key must be {self._engine.key_text_length} characters, got {len(text)}"
            raise InvalidKeyError(msg)
        return self._engine.key_from_text(text)

    def is_well_formed(self, text: str) -> bool:
        """Cheap structural check, used to refuse obviously wrong keys."""
        return len(text) == self._engine.key_text_length and _is_url_safe(text)

    def quick_url(self, resource_id: str, key_text: str) -> str:
        segment = build_quick_link(resource_id, key_text)
        return f"{self._web_url}/{LinkKind.QUICK.value}/{segment}"

    def stepped_url(self, resource_id: str) -> str:
        segment = build_stepped_link(resource_id)
        return f"{self._web_url}/{LinkKind.STEPPED.value}/{segment}"

    def parse(self, link: str) -> LinkDescriptor:
        """
        Parse a full link or a bare path segment.

        Full links are classified by their ``/q/`` or ``/s/`` prefix; bare
        segments by their length alone.

        Raises:
            InvalidLinkError: If the link does not have a valid structure.
        """
        link = link.strip()
        path = urlsplit(link).path if "/" in link else link
        parts = [part for part in path.split("/") if part]
        if not parts:
            raise InvalidLinkError("Link is empty", length=0)

        segment = parts[-1]
        prefix = parts[-2] if len(parts) > 1 else None
        match prefix:
            case LinkKind.QUICK.value:
                return split_quick_link(segment, self.key_text_length)
            case LinkKind.STEPPED.value:
                return LinkDescriptor(resource_id=build_stepped_link(segment))
            case None:
                return self._parse_segment(segment)
            case _:
                msg = f"Unknown link route: {prefix}"
                raise InvalidLinkError(msg, length=len(segment))

    def _parse_segment(self, segment: str) -> LinkDescriptor:
        if len(segment) == self.quick_length:
            return split_quick_link(segment, self.key_text_length)
        if len(segment) == RESOURCE_ID_LENGTH:
            return LinkDescriptor(resource_id=build_stepped_link(segment))
        logger.debug("Rejected link segment", length=len(segment))
        raise InvalidLinkError("Link segment has an unexpected length", length=len(segment))
