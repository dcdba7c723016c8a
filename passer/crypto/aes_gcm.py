"""
AES-256-GCM crypto engine.

Typical flow:
    Encryption: ``item -> msgpack -> zlib -> AES-GCM -> nonce ++ ciphertext``
    Decryption: ``nonce ++ ciphertext -> AES-GCM -> zlib -> msgpack -> item``

Each call to ``encrypt`` draws a fresh 96-bit nonce, so a single key can seal any
number of items.
"""

import base64
import binascii
import os
import zlib

import msgpack
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from passer.crypto.key_material import KeyMaterial
from passer.exceptions import DecryptionError, EncryptionError, InvalidKeyError
from passer.models.pack import DecryptedItem

KEY_SIZE = 32
KEY_TEXT_LENGTH = 43  # ceil(32 * 4 / 3), no padding
_NONCE_SIZE = 12
_TAG_SIZE = 16
_COMPRESSION_LEVEL = 8
_FIELDS = frozenset({"plain_message", "name", "size", "data"})


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.b64decode(text + padding, altchars=b"-_", validate=True)


class AesGcmKey:
    """
    Symmetric key sealing items with AES-256-GCM.

    Args:
        key_bytes: Exactly 32 bytes of key material.

    Raises:
        InvalidKeyError: If ``key_bytes`` is not 32 bytes long.
    """

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        if len(key_bytes) != KEY_SIZE:
            msg = f"Key must be {KEY_SIZE} bytes, got {len(key_bytes)}"
            raise InvalidKeyError(msg)
        self._key = KeyMaterial(key_bytes)
        self._cipher: AESGCM | None = AESGCM(self._key.reveal())

    def __repr__(self) -> str:
        state = "cleared" if self._cipher is None else "active"
        return f"AesGcmKey(<{state}>)"

    def encrypt(self, name: str, data: str | bytes) -> bytes:
        cipher = self._require_cipher()
        plain_message = isinstance(data, str)
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        try:
            inner = msgpack.packb(
                {"plain_message": plain_message, "name": name, "size": len(raw), "data": raw},
                use_bin_type=True,
            )
            compressed = zlib.compress(inner, _COMPRESSION_LEVEL)
            nonce = os.urandom(_NONCE_SIZE)
            return nonce + cipher.encrypt(nonce, compressed, None)
        except (TypeError, ValueError, OverflowError) as e:
            msg = f"Failed to encrypt {name}: {e}"
            raise EncryptionError(msg, name=name) from e

    def decrypt(self, payload: bytes) -> DecryptedItem:
        cipher = self._require_cipher()
        if len(payload) < _NONCE_SIZE + _TAG_SIZE:
            msg = f"Ciphertext too short: {len(payload)} bytes"
            raise DecryptionError(msg)

        nonce, sealed = payload[:_NONCE_SIZE], payload[_NONCE_SIZE:]
        try:
            compressed = cipher.decrypt(nonce, sealed, None)
        except InvalidTag as e:
            raise DecryptionError("Authentication failed, possibly wrong key") from e

        try:
            inner = msgpack.unpackb(zlib.decompress(compressed), raw=False)
        except Exception as e:
            msg = f"Failed to unpack decrypted item: {e}"
            raise DecryptionError(msg) from e

        return self._to_item(inner)

    def to_text(self) -> str:
        self._require_cipher()
        return _b64encode(self._key.reveal())

    def clear(self) -> None:
        self._key.wipe()
        self._cipher = None

    def _require_cipher(self) -> AESGCM:
        if self._cipher is None:
            raise InvalidKeyError("Key has been cleared")
        return self._cipher

    @staticmethod
    def _to_item(inner: object) -> DecryptedItem:
        if not isinstance(inner, dict) or not _FIELDS <= inner.keys():
            raise DecryptionError("Decrypted item has an unexpected shape")
        if (
            not isinstance(inner["data"], bytes)
            or not isinstance(inner["name"], str)
            or not isinstance(inner["size"], int)
            or not isinstance(inner["plain_message"], bool)
        ):
            raise DecryptionError("Decrypted item has unexpected field types")
        return DecryptedItem(
            name=inner["name"],
            size=inner["size"],
            data=inner["data"],
            plain_message=inner["plain_message"],
        )


class AesGcmEngine:
    """Default crypto engine backed by ``cryptography``'s AESGCM."""

    key_size = KEY_SIZE
    key_text_length = KEY_TEXT_LENGTH

    def generate_key(self, key_bytes: bytes) -> AesGcmKey:
        return AesGcmKey(key_bytes)

    def key_from_text(self, text: str) -> AesGcmKey:
        try:
            key_bytes = _b64decode(text)
        except (binascii.Error, ValueError) as e:
            raise InvalidKeyError("Key is not valid base64url") from e
        return AesGcmKey(key_bytes)
