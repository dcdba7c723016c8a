"""
Passer Python Client.

Encrypt text or files locally and share them through one-time download links.

Example:
    ```python
    from passer import PasserClient, TTL

    async with PasserClient() as client:
        session = client.new_encryption_session()
        await session.add_text("my secret")
        result = await session.upload(TTL.ONE_HOUR)
        print(result.quick_link)

        retrieval = await client.open_link(other_stepped_link)
        await retrieval.decrypt(key_text)
    ```
"""

from passer.client import PasserClient
from passer.config import PasserConfig
from passer.exceptions import (
    APIError,
    CorruptedPayloadError,
    CryptoError,
    DecryptionError,
    EncryptionError,
    InvalidKeyError,
    InvalidLinkError,
    LinkError,
    NetworkError,
    NotFoundError,
    PasserError,
    PayloadError,
    SessionLockedError,
    UploadError,
)
from passer.models import (
    TTL,
    Alert,
    AlertKind,
    AlertLevel,
    DecryptedItem,
    EncryptedPack,
    LinkDescriptor,
    LinkKind,
    PlainItem,
    RetrievalStatus,
    UploadResult,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "PasserClient",
    "PasserConfig",
    # Models
    "TTL",
    "Alert",
    "AlertKind",
    "AlertLevel",
    "DecryptedItem",
    "EncryptedPack",
    "LinkDescriptor",
    "LinkKind",
    "PlainItem",
    "RetrievalStatus",
    "UploadResult",
    # Exceptions
    "PasserError",
    "CryptoError",
    "EncryptionError",
    "DecryptionError",
    "InvalidKeyError",
    "LinkError",
    "InvalidLinkError",
    "PayloadError",
    "CorruptedPayloadError",
    "APIError",
    "NotFoundError",
    "UploadError",
    "NetworkError",
    "SessionLockedError",
]
