"""
User-facing alerts.

Every recoverable failure (and a couple of successes) is reported as an Alert
instead of an exception once it crosses a service boundary.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class AlertKind(Enum):
    TOO_SMALL = auto()
    TOO_LARGE = auto()
    TOO_MUCH_DATA = auto()
    ENCRYPTION_FAILED = auto()
    UPLOAD_FAILED = auto()
    UPLOAD_SUCCEEDED = auto()
    INVALID_KEY = auto()
    DECRYPTION_SUCCEEDED = auto()


class AlertLevel(Enum):
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"


@dataclass(frozen=True, kw_only=True)
class Alert:
    """
    A dismissible message.

    Attributes:
        kind: What happened.
        level: Severity used for presentation.
        message: Human-readable text.
        subject: Display name of the item concerned, if any.
    """

    kind: AlertKind
    level: AlertLevel
    message: str
    subject: str | None = None

    @property
    def is_error(self) -> bool:
        return self.level is not AlertLevel.SUCCESS

    @classmethod
    def too_small(cls, name: str) -> Self:
        return cls(
            kind=AlertKind.TOO_SMALL,
            level=AlertLevel.WARNING,
            message=f"{name} is empty",
            subject=name,
        )

    @classmethod
    def too_large(cls, name: str, limit: int) -> Self:
        return cls(
            kind=AlertKind.TOO_LARGE,
            level=AlertLevel.DANGER,
            message=f"{name} is too big for encryption. Maximum {limit // (1024 * 1024)} MiB allowed",
            subject=name,
        )

    @classmethod
    def too_much_data(cls, limit: int) -> Self:
        return cls(
            kind=AlertKind.TOO_MUCH_DATA,
            level=AlertLevel.DANGER,
            message=f"Too much data. Maximum {limit // (1024 * 1024)} MiB allowed in total",
        )

    @classmethod
    def encryption_failed(cls, name: str) -> Self:
        return cls(
            kind=AlertKind.ENCRYPTION_FAILED,
            level=AlertLevel.DANGER,
            message=f"{name} could not be encrypted",
            subject=name,
        )

    @classmethod
    def upload_failed(cls) -> Self:
        return cls(
            kind=AlertKind.UPLOAD_FAILED,
            level=AlertLevel.DANGER,
            message="Failed to upload",
        )

    @classmethod
    def upload_succeeded(cls) -> Self:
        return cls(
            kind=AlertKind.UPLOAD_SUCCEEDED,
            level=AlertLevel.SUCCESS,
            message="Uploaded successfully. The link can be opened only once",
        )

    @classmethod
    def invalid_key(cls) -> Self:
        return cls(
            kind=AlertKind.INVALID_KEY,
            level=AlertLevel.DANGER,
            message="Invalid key",
        )

    @classmethod
    def decryption_succeeded(cls) -> Self:
        return cls(
            kind=AlertKind.DECRYPTION_SUCCEEDED,
            level=AlertLevel.SUCCESS,
            message="Decrypted successfully. The secret is no longer available on the server",
        )
