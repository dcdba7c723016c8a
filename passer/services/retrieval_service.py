"""
Retrieval state machine.

Drives ``link -> fetch -> decode -> (key) -> decrypt -> present`` for a single
link. Each failure kind ends in its own state:

    DOWNLOADING -> INVALID_LINK | NOT_FOUND | CORRUPTED   (terminal)
    DOWNLOADING -> DOWNLOADED
    DOWNLOADED  -> DECRYPTING -> DECRYPTED                (terminal)
    DECRYPTING  -> DOWNLOADED                             (wrong key, retryable)

The session may be disposed while a step is pending; that step's result is then
dropped instead of being applied.
"""

import asyncio
from collections.abc import Sequence

import structlog

from passer.api.endpoints.secrets import fetch_secret
from passer.api.http_client import AsyncHttpClient, redact_id
from passer.core import pack_codec
from passer.core.format import size_to_string
from passer.core.lifetime import Lifetime
from passer.crypto.key_codec import KeyCodec
from passer.crypto.protocol import SecretKey
from passer.exceptions import (
    CorruptedPayloadError,
    CryptoError,
    InvalidKeyError,
    InvalidLinkError,
    NetworkError,
    NotFoundError,
)
from passer.models.alert import Alert
from passer.models.link import LinkDescriptor
from passer.models.pack import DecryptedItem
from passer.models.retrieval import RetrievalStatus

logger = structlog.get_logger(__name__)


def _decrypt_all(key: SecretKey, buffers: Sequence[bytes]) -> tuple[DecryptedItem, ...]:
    return tuple(key.decrypt(buffer) for buffer in buffers)


class RetrievalSession:
    """
    One retrieval attempt for one link.

    A new link always needs a new session; no state leads back out of a
    terminal state.

    Args:
        http: Async HTTP client.
        codec: Key codec used to parse the link and the key text.
        link: Full link or bare link segment.
    """

    def __init__(self, http: AsyncHttpClient, codec: KeyCodec, link: str) -> None:
        self._http = http
        self._codec = codec
        self._link = link
        self._lifetime = Lifetime()
        self._started = False

        self._status = RetrievalStatus.DOWNLOADING
        self._descriptor: LinkDescriptor | None = None
        self._buffers: tuple[bytes, ...] | None = None
        self._items: tuple[DecryptedItem, ...] = ()
        self._alerts: tuple[Alert, ...] = ()

    def __repr__(self) -> str:
        return f"RetrievalSession(status={self._status.name})"

    @property
    def status(self) -> RetrievalStatus:
        return self._status

    @property
    def alerts(self) -> tuple[Alert, ...]:
        return self._alerts

    @property
    def items(self) -> tuple[DecryptedItem, ...]:
        return self._items

    @property
    def descriptor(self) -> LinkDescriptor | None:
        return self._descriptor

    @property
    def payload_size(self) -> int:
        """Total ciphertext size of the downloaded payload."""
        if self._buffers is None:
            return 0
        return sum(len(buffer) for buffer in self._buffers)

    @property
    def disposed(self) -> bool:
        return self._lifetime.disposed

    def dispose(self) -> None:
        """Tear the session down. Pending steps will discard their results."""
        if self._lifetime.disposed:
            return
        self._lifetime.dispose()
        self._buffers = None
        self._items = ()
        logger.debug("Retrieval session disposed", status=self._status.name)

    async def start(self) -> RetrievalStatus:
        """
        Validate the link, download and decode the payload.

        Runs once per session; later calls return the current status. When the
        link embeds the key, decryption follows automatically.

        Returns:
            The status reached.
        """
        if self._started or self._lifetime.disposed:
            return self._status
        self._started = True

        try:
            descriptor = self._codec.parse(self._link)
        except InvalidLinkError as e:
            logger.debug("Invalid link", length=e.length)
            return self._transition(RetrievalStatus.INVALID_LINK)
        self._descriptor = descriptor

        generation = self._lifetime.current
        try:
            data = await fetch_secret(self._http, descriptor.resource_id)
        except (NotFoundError, NetworkError) as e:
            if not self._lifetime.is_current(generation):
                return self._status
            logger.debug(
                "Secret not available",
                resource_id=redact_id(descriptor.resource_id),
                error=e.__class__.__name__,
            )
            return self._transition(RetrievalStatus.NOT_FOUND)

        if not self._lifetime.is_current(generation):
            logger.debug("Dropping download for disposed session")
            return self._status

        try:
            buffers = pack_codec.decode(data)
        except CorruptedPayloadError as e:
            logger.warning("Downloaded payload is corrupted", error=e.message)
            return self._transition(RetrievalStatus.CORRUPTED)

        self._buffers = tuple(buffers)
        self._transition(RetrievalStatus.DOWNLOADED)
        logger.debug(
            "Payload downloaded",
            items=len(buffers),
            size=size_to_string(self.payload_size),
        )

        if descriptor.key_text is not None:
            return await self.decrypt(descriptor.key_text)
        return self._status

    async def decrypt(self, key_text: str) -> RetrievalStatus:
        """
        Decrypt every downloaded buffer with the given key.

        Refused without touching the engine unless the session is DOWNLOADED
        and the key text is well formed. A key the engine rejects raises an
        invalid-key alert and returns the session to DOWNLOADED.

        Returns:
            The status reached.
        """
        if self._status is not RetrievalStatus.DOWNLOADED or self._buffers is None:
            return self._status
        if not self._codec.is_well_formed(key_text):
            logger.debug("Refusing malformed key", length=len(key_text))
            return self._status

        try:
            key = self._codec.from_text(key_text)
        except InvalidKeyError:
            self._alerts = (Alert.invalid_key(),)
            return self._status

        buffers = self._buffers
        self._transition(RetrievalStatus.DECRYPTING)
        generation = self._lifetime.current
        try:
            items = await asyncio.to_thread(_decrypt_all, key, buffers)
        except CryptoError as e:
            if not self._lifetime.is_current(generation):
                return self._status
            logger.warning("Decryption failed", error=e.__class__.__name__)
            self._alerts = (Alert.invalid_key(),)
            return self._transition(RetrievalStatus.DOWNLOADED)
        finally:
            key.clear()

        if not self._lifetime.is_current(generation):
            logger.debug("Dropping decrypted items for disposed session")
            return self._status

        self._items = items
        self._buffers = None
        self._alerts = (Alert.decryption_succeeded(),)
        logger.info("Secret decrypted", items=len(items))
        return self._transition(RetrievalStatus.DECRYPTED)

    def _transition(self, status: RetrievalStatus) -> RetrievalStatus:
        logger.debug("Retrieval transition", source=self._status.name, target=status.name)
        self._status = status
        return status
