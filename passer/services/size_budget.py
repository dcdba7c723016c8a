"""
Size and expiry policy applied before any expensive work.
"""

from collections.abc import Iterable
from typing import Self

from passer.config import PasserConfig
from passer.models.alert import Alert
from passer.models.pack import EncryptedPack
from passer.models.upload import TTL


def ttl_to_wire_code(level: int) -> str:
    """
    Map an expiry level (1-5) to the server's ttl token.

    Raises:
        ValueError: If the level is unknown. This is a programming error.
    """
    return TTL(level).wire_code


def total_size(packs: Iterable[EncryptedPack]) -> int:
    return sum(pack.size for pack in packs)


class SizeBudget:
    """
    Per-item and aggregate byte limits.

    Args:
        max_item_size: Largest accepted single item. Items of exactly this size pass.
        max_total_size: Largest accepted sum of encrypted packs.
    """

    def __init__(self, max_item_size: int, max_total_size: int) -> None:
        if max_total_size < max_item_size:
            msg = "max_total_size must not be smaller than max_item_size"
            raise ValueError(msg)
        self._max_item_size = max_item_size
        self._max_total_size = max_total_size

    @classmethod
    def from_config(cls, config: PasserConfig) -> Self:
        return cls(config.max_item_size, config.max_total_size)

    @property
    def max_item_size(self) -> int:
        return self._max_item_size

    @property
    def max_total_size(self) -> int:
        return self._max_total_size

    def check_item(self, name: str, size: int) -> Alert | None:
        """Return an alert for an empty or oversized item, None if it fits."""
        if size == 0:
            return Alert.too_small(name)
        if size > self._max_item_size:
            return Alert.too_large(name, self._max_item_size)
        return None

    def check_aggregate(self, size: int) -> Alert | None:
        """Return an alert if the sum of all held packs exceeds the ceiling."""
        if size > self._max_total_size:
            return Alert.too_much_data(self._max_total_size)
        return None

    def usage_percent(self, size: int) -> float:
        """Share of the aggregate ceiling in use, as a percentage."""
        return round(size * 100 / self._max_total_size, 1)
