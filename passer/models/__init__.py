"""
Domain models for Passer.

These are immutable (frozen) dataclasses and enums representing the core domain concepts.
"""

from passer.models.alert import Alert, AlertKind, AlertLevel
from passer.models.link import LinkDescriptor, LinkKind
from passer.models.pack import DecryptedItem, EncryptedPack, PlainItem
from passer.models.retrieval import RetrievalStatus
from passer.models.upload import TTL, UploadResult

__all__ = [
    # Packs
    "PlainItem",
    "EncryptedPack",
    "DecryptedItem",
    # Alerts
    "Alert",
    "AlertKind",
    "AlertLevel",
    # Links
    "LinkDescriptor",
    "LinkKind",
    # Retrieval
    "RetrievalStatus",
    # Upload
    "TTL",
    "UploadResult",
]
