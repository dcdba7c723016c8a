"""
Encryption pipeline.

Turns plaintext items into encrypted packs. Size checks run before the crypto
engine is invoked, and one item's failure never affects another item.
"""

import asyncio
import secrets
import string
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from passer.core.tasks import gather_ordered
from passer.crypto.protocol import SecretKey
from passer.models.alert import Alert
from passer.models.pack import EncryptedPack, PlainItem
from passer.services.size_budget import SizeBudget, total_size

logger = structlog.get_logger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 8


def generate_obfuscated_id() -> str:
    """Random short identifier shown instead of the item name."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


@dataclass(frozen=True, kw_only=True)
class PackResult:
    """
    Outcome of packing a batch of items.

    Attributes:
        packs: Every pack held after the batch (previous ones first, then new successes in input order).
        alerts: Alerts raised by the batch, per-item alerts in input order followed by any aggregate alert.
    """

    packs: tuple[EncryptedPack, ...]
    alerts: tuple[Alert, ...]

    @property
    def total_size(self) -> int:
        return total_size(self.packs)


class EncryptionPipeline:
    """
    Encrypts plaintext items with one session key.

    Args:
        key: Session key used for every item.
        budget: Size policy.
    """

    def __init__(self, key: SecretKey, budget: SizeBudget) -> None:
        self._key = key
        self._budget = budget

    async def pack(self, item: PlainItem) -> EncryptedPack | Alert:
        """
        Encrypt a single item.

        Returns:
            The encrypted pack, or an alert if the item is empty, too large, or
            could not be encrypted.
        """
        if (alert := self._budget.check_item(item.name, item.size)) is not None:
            logger.debug("Item rejected by size policy", kind=alert.kind.name, size=item.size)
            return alert

        try:
            data = await item.read()
        except OSError as e:
            logger.warning("Item could not be read", error=e.__class__.__name__)
            return Alert.encryption_failed(item.name)

        # A file may have changed on disk since it was described.
        read_size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
        if (alert := self._budget.check_item(item.name, read_size)) is not None:
            logger.debug("Item rejected after read", kind=alert.kind.name, size=read_size)
            return alert

        try:
            ciphertext = await asyncio.to_thread(self._key.encrypt, item.name, data)
        except Exception as e:
            logger.warning("Item could not be encrypted", error=e.__class__.__name__)
            return Alert.encryption_failed(item.name)

        return EncryptedPack(
            obfuscated_id=generate_obfuscated_id(),
            name=item.name,
            size=len(ciphertext),
            ciphertext=ciphertext,
        )

    async def pack_all(
        self,
        items: Iterable[PlainItem],
        held: Sequence[EncryptedPack] = (),
    ) -> PackResult:
        """
        Encrypt items concurrently and merge them with the packs already held.

        The aggregate ceiling is checked over ``held`` plus the new packs. When it
        is exceeded an alert is appended, but no pack is discarded.

        Args:
            items: Items to encrypt.
            held: Packs accumulated before this batch.

        Returns:
            A new PackResult; ``held`` is never mutated.
        """
        results = await gather_ordered(self.pack(item) for item in items)

        packs: list[EncryptedPack] = []
        alerts: list[Alert] = []
        for result in results:
            match result:
                case EncryptedPack():
                    packs.append(result)
                case Alert():
                    alerts.append(result)

        merged = (*held, *packs)
        if (aggregate := self._budget.check_aggregate(total_size(merged))) is not None:
            alerts.append(aggregate)

        logger.debug(
            "Packed batch",
            encrypted=len(packs),
            alerts=len(alerts),
            held=len(merged),
        )
        return PackResult(packs=merged, alerts=tuple(alerts))
