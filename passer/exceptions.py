"""
Passer exception hierarchy.

All exceptions inherit from PasserError for easy catching.
"""

from typing import Any


class PasserError(Exception):
    """Base exception for all passer errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class CryptoError(PasserError):
    """Cryptographic operation failed."""


class EncryptionError(CryptoError):
    """Failed to encrypt a single item."""

    def __init__(self, message: str, *, name: str | None = None) -> None:
        super().__init__(message, name=name)
        self.name = name


class DecryptionError(CryptoError):
    """Failed to decrypt a payload (wrong key or tampered data)."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message, index=index)
        self.index = index


class InvalidKeyError(CryptoError):
    """Key text is malformed and cannot be turned into a key."""


class LinkError(PasserError):
    """Link-related error."""


class InvalidLinkError(LinkError):
    """Link does not have the expected structure."""

    def __init__(self, message: str, *, length: int | None = None) -> None:
        super().__init__(message, length=length)
        self.length = length


class PayloadError(PasserError):
    """Wire payload error."""


class CorruptedPayloadError(PayloadError):
    """Downloaded bytes are not a well-formed sequence of byte arrays."""


class APIError(PasserError):
    """Storage server request failed."""

    def __init__(self, message: str, *, code: int, endpoint: str | None = None) -> None:
        super().__init__(message, code=code, endpoint=endpoint)
        self.code = code
        self.endpoint = endpoint


class NotFoundError(APIError):
    """Secret is absent, already consumed or expired."""

    def __init__(self, message: str, *, code: int = 404, endpoint: str | None = None) -> None:
        super().__init__(message, code=code, endpoint=endpoint)


class UploadError(APIError):
    """Server refused to store the payload."""


class NetworkError(PasserError):
    """Network-level error (connection failed, timeout)."""


class SessionLockedError(PasserError):
    """Session was already uploaded and must be reset before editing."""

    def __init__(self, message: str = "Session already uploaded, reset it first") -> None:
        super().__init__(message)
