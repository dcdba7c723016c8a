"""
Upload coordination.

Encodes the packs into a wire payload, stores it once and builds the links.
"""

from collections.abc import Sequence

import structlog

from passer.api.endpoints.secrets import store_secret
from passer.api.http_client import AsyncHttpClient, redact_id
from passer.core import pack_codec
from passer.core.format import size_to_string
from passer.crypto.key_codec import KeyCodec
from passer.crypto.protocol import SecretKey
from passer.exceptions import PasserError, SessionLockedError
from passer.models.alert import Alert
from passer.models.pack import EncryptedPack
from passer.models.upload import TTL, UploadResult
from passer.services.size_budget import SizeBudget, total_size

logger = structlog.get_logger(__name__)


class UploadCoordinator:
    """
    Submits one packing session to the storage server.

    Only one successful upload is allowed until ``reset`` is called. A failed
    upload leaves the coordinator ready to retry with the same packs.

    Args:
        http: Async HTTP client.
        codec: Key codec used to build links.
        budget: Size policy re-checked before sending.
    """

    def __init__(self, http: AsyncHttpClient, codec: KeyCodec, budget: SizeBudget) -> None:
        self._http = http
        self._codec = codec
        self._budget = budget
        self._result: UploadResult | None = None
        self._in_flight = False

    @property
    def result(self) -> UploadResult | None:
        return self._result

    @property
    def uploaded(self) -> bool:
        return self._result is not None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def reset(self) -> None:
        if self._in_flight:
            raise SessionLockedError("Upload in progress")
        self._result = None

    async def upload(
        self,
        key: SecretKey,
        packs: Sequence[EncryptedPack],
        ttl: TTL,
    ) -> UploadResult | Alert:
        """
        Upload the packs with the given expiry.

        Args:
            key: Key the packs were encrypted with, embedded in the quick link.
            packs: Packs to send, in order.
            ttl: Expiry level.

        Returns:
            The upload result with both links, or an upload-failed alert.

        Raises:
            SessionLockedError: If this session was already uploaded.
        """
        if self._result is not None:
            raise SessionLockedError()
        if self._in_flight:
            raise SessionLockedError("Upload already in progress")

        if not packs or self._budget.check_aggregate(total_size(packs)) is not None:
            logger.debug("Upload refused locally", packs=len(packs))
            return Alert.upload_failed()

        payload = pack_codec.encode([pack.ciphertext for pack in packs])
        key_text = self._codec.to_text(key)
        self._in_flight = True
        try:
            resource_id = await store_secret(self._http, payload, ttl)
            result = UploadResult(
                resource_id=resource_id,
                key_text=key_text,
                quick_link=self._codec.quick_url(resource_id, key_text),
                stepped_link=self._codec.stepped_url(resource_id),
                ttl=ttl,
            )
        except PasserError as e:
            logger.warning("Upload failed", error=e.__class__.__name__)
            return Alert.upload_failed()
        finally:
            self._in_flight = False

        self._result = result
        logger.info(
            "Upload complete",
            resource_id=redact_id(resource_id),
            packs=len(packs),
            size=size_to_string(len(payload)),
            ttl=ttl.wire_code,
        )
        return result
