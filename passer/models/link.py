"""
Link domain models.
"""

from dataclasses import dataclass
from enum import Enum


class LinkKind(Enum):
    """How the decryption key travels with the link."""

    QUICK = "q"
    STEPPED = "s"


@dataclass(frozen=True, kw_only=True)
class LinkDescriptor:
    """
    Parsed access link.

    Attributes:
        resource_id: Server identifier of the stored payload.
        key_text: Key text for quick links, None for stepped links.
    """

    resource_id: str
    key_text: str | None = None

    @property
    def kind(self) -> LinkKind:
        return LinkKind.STEPPED if self.key_text is None else LinkKind.QUICK

    def __repr__(self) -> str:
        key = "None" if self.key_text is None else "***"
        return f"LinkDescriptor(resource_id={self.resource_id!r}, key_text={key})"
