"""
Crypto engine protocol definition.

This defines the interface for the symmetric encryption engine, allowing different
implementations to be swapped without changing the rest of the codebase.
"""

from typing import Protocol, runtime_checkable

from passer.models.pack import DecryptedItem


@runtime_checkable
class SecretKey(Protocol):
    """Protocol for an opaque symmetric key."""

    def encrypt(self, name: str, data: str | bytes) -> bytes:
        """
        Encrypt one named item.

        The name and the text/file flag travel inside the ciphertext.

        Args:
            name: Display name of the item.
            data: Text (typed message) or bytes (file content).

        Returns:
            Opaque ciphertext.

        Raises:
            EncryptionError: If the item cannot be encrypted.
        """
        ...

    def decrypt(self, payload: bytes) -> DecryptedItem:
        """
        Decrypt one ciphertext produced by ``encrypt``.

        Args:
            payload: Opaque ciphertext.

        Returns:
            The decrypted item with its original name.

        Raises:
            DecryptionError: If the key is wrong or the data was tampered with.
        """
        ...

    def to_text(self) -> str:
        """Canonical URL-safe textual form of the key."""
        ...

    def clear(self) -> None:
        """Wipe key material from memory. The key is unusable afterwards."""
        ...


@runtime_checkable
class CryptoEngine(Protocol):
    """
    Abstract interface for the symmetric encryption engine.

    Attributes:
        key_size: Number of random bytes a key is built from.
        key_text_length: Exact length of a key's textual form.
    """

    key_size: int
    key_text_length: int

    def generate_key(self, key_bytes: bytes) -> SecretKey:
        """
        Build a key from random bytes.

        Raises:
            InvalidKeyError: If ``key_bytes`` has the wrong length.
        """
        ...

    def key_from_text(self, text: str) -> SecretKey:
        """
        Parse a key from its textual form.

        Raises:
            InvalidKeyError: If the text cannot be decoded into a key.
        """
        ...
