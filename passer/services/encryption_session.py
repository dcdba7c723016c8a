"""
Encryption session.

Owns the session key, the list of encrypted packs and the upload state. Every
change replaces the pack tuple with a new one, so interleaved asynchronous
completions cannot lose updates.
"""

from collections.abc import Iterable

import structlog

from passer.api.http_client import AsyncHttpClient
from passer.crypto.key_codec import KeyCodec
from passer.exceptions import SessionLockedError
from passer.models.alert import Alert, AlertKind
from passer.models.pack import EncryptedPack, PlainItem
from passer.models.upload import TTL, UploadResult
from passer.services.encryption_service import EncryptionPipeline
from passer.services.size_budget import SizeBudget, total_size
from passer.services.upload_service import UploadCoordinator

logger = structlog.get_logger(__name__)


class EncryptionSession:
    """
    Collects encrypted packs and uploads them once.

    Args:
        http: Async HTTP client.
        codec: Key codec; a fresh key is generated for the session.
        budget: Size policy.
        default_ttl: Expiry used when ``upload`` is called without one.
    """

    def __init__(
        self,
        http: AsyncHttpClient,
        codec: KeyCodec,
        budget: SizeBudget,
        *,
        default_ttl: TTL = TTL.ONE_DAY,
    ) -> None:
        self._codec = codec
        self._budget = budget
        self._default_ttl = default_ttl
        self._key = codec.generate()
        self._pipeline = EncryptionPipeline(self._key, budget)
        self._uploader = UploadCoordinator(http, codec, budget)
        self._packs: tuple[EncryptedPack, ...] = ()
        self._alerts: tuple[Alert, ...] = ()
        self._closed = False

    def __repr__(self) -> str:
        return f"EncryptionSession(packs={len(self._packs)}, uploaded={self.uploaded})"

    @property
    def packs(self) -> tuple[EncryptedPack, ...]:
        return self._packs

    @property
    def alerts(self) -> tuple[Alert, ...]:
        return self._alerts

    @property
    def total_size(self) -> int:
        return total_size(self._packs)

    @property
    def usage_percent(self) -> float:
        return self._budget.usage_percent(self.total_size)

    @property
    def uploaded(self) -> bool:
        return self._uploader.uploaded

    @property
    def result(self) -> UploadResult | None:
        return self._uploader.result

    @property
    def can_upload(self) -> bool:
        return (
            not self._closed
            and not self.uploaded
            and not self._uploader.in_flight
            and len(self._packs) > 0
            and self._budget.check_aggregate(self.total_size) is None
        )

    async def add(self, items: Iterable[PlainItem]) -> tuple[Alert, ...]:
        """
        Encrypt items and append the successes to the held packs.

        Returns:
            Alerts raised by this batch (also available as ``alerts``).

        Raises:
            SessionLockedError: If the session is closed, uploaded or uploading,
                including when an upload started while this batch was encrypting.
        """
        self._require_editable()
        items = list(items)
        if not items:
            return ()

        before = self._packs
        pipeline = self._pipeline
        result = await pipeline.pack_all(items, before)
        if self._closed or pipeline is not self._pipeline:
            # Closed or reset while encrypting, the packs belong to a discarded key.
            return ()
        if self.uploaded or self._uploader.in_flight:
            raise SessionLockedError("Session was uploaded while encrypting")
        # The pack tuple may have changed while encrypting; append to the current one.
        self._packs = (*self._packs, *result.packs[len(before) :])

        alerts = [alert for alert in result.alerts if alert.kind is not AlertKind.TOO_MUCH_DATA]
        if (aggregate := self._budget.check_aggregate(self.total_size)) is not None:
            alerts.append(aggregate)
        self._alerts = tuple(alerts)
        return self._alerts

    async def add_text(self, text: str) -> tuple[Alert, ...]:
        return await self.add([PlainItem.from_text(text)])

    def remove(self, index: int) -> EncryptedPack:
        """
        Remove a pack by position.

        Raises:
            IndexError: If there is no pack at ``index``.
        """
        self._require_editable()
        index = range(len(self._packs))[index]
        removed = self._packs[index]
        self._packs = self._packs[:index] + self._packs[index + 1 :]
        return removed

    def reset(self) -> None:
        """
        Drop all packs and alerts and start over with a fresh key.

        Raises:
            SessionLockedError: If the session is closed or an upload is in progress.
        """
        if self._closed:
            raise SessionLockedError("Session is closed")
        if self._uploader.in_flight:
            raise SessionLockedError("Upload in progress")
        self._key.clear()
        self._key = self._codec.generate()
        self._pipeline = EncryptionPipeline(self._key, self._budget)
        self._packs = ()
        self._alerts = ()
        self._uploader.reset()
        logger.debug("Encryption session reset")

    async def upload(self, ttl: TTL | None = None) -> UploadResult | Alert:
        """
        Upload the held packs.

        Returns:
            The upload result, or an upload-failed alert. Packs are kept on
            failure so the upload can be retried without re-encrypting.

        Raises:
            SessionLockedError: If the session was already uploaded.
        """
        if self._closed:
            raise SessionLockedError("Session is closed")
        result = await self._uploader.upload(self._key, self._packs, ttl or self._default_ttl)
        match result:
            case UploadResult():
                self._alerts = (Alert.upload_succeeded(),)
            case Alert():
                self._alerts = (result,)
        return result

    def close(self) -> None:
        """Wipe the key and drop every pack. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._key.clear()
        self._packs = ()
        self._alerts = ()
        logger.debug("Encryption session closed")

    def _require_editable(self) -> None:
        if self._closed:
            raise SessionLockedError("Session is closed")
        if self._uploader.in_flight:
            raise SessionLockedError("Upload in progress")
        if self.uploaded:
            raise SessionLockedError()
