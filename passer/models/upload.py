"""
Upload-related domain models.
"""

from dataclasses import dataclass
from enum import IntEnum


class TTL(IntEnum):
    """Server-side expiry levels selectable at upload time."""

    ONE_HOUR = 1
    TWELVE_HOURS = 2
    ONE_DAY = 3
    THREE_DAYS = 4
    ONE_WEEK = 5

    @property
    def wire_code(self) -> str:
        """Token understood by the server's ``ttl`` query parameter."""
        match self:
            case self.ONE_HOUR:
                return "1h"
            case self.TWELVE_HOURS:
                return "12h"
            case self.ONE_DAY:
                return "1d"
            case self.THREE_DAYS:
                return "3d"
            case self.ONE_WEEK:
                return "7d"

    @property
    def label(self) -> str:
        match self:
            case self.ONE_HOUR:
                return "1 hour"
            case self.TWELVE_HOURS:
                return "12 hours"
            case self.ONE_DAY:
                return "1 day"
            case self.THREE_DAYS:
                return "3 days"
            case self.ONE_WEEK:
                return "1 week"


@dataclass(frozen=True, kw_only=True)
class UploadResult:
    """
    Everything needed to share an uploaded secret.

    Attributes:
        resource_id: Server-assigned identifier of the stored payload.
        key_text: Textual decryption key, shared separately from the stepped link.
        quick_link: Link carrying both identifier and key.
        stepped_link: Link carrying only the identifier.
        ttl: Expiry level the payload was stored with.
    """

    resource_id: str
    key_text: str
    quick_link: str
    stepped_link: str
    ttl: TTL

    def __repr__(self) -> str:
        return f"UploadResult(resource_id={self.resource_id[:8]}..., ttl={self.ttl.name})"
