"""
Pack domain models.

A pack is one named plaintext item plus its derived encrypted form. Plaintext
items and decrypted items only live in memory for the lifetime of a session.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

_TEXT_NAME = "Text"


@dataclass(frozen=True, kw_only=True)
class PlainItem:
    """
    A plaintext item waiting to be encrypted.

    Attributes:
        name: Display name (file name, or "Text" for typed messages).
        size: Length of the plaintext in bytes.
        source: Text, raw bytes, or a path read lazily at encryption time.
    """

    name: str
    size: int
    source: str | bytes | Path = field(repr=False)

    def __post_init__(self) -> None:
        if self.size < 0:
            msg = "size must be non-negative"
            raise ValueError(msg)

    @property
    def plain_message(self) -> bool:
        """Whether the item is a typed message rather than a file."""
        return isinstance(self.source, str)

    @classmethod
    def from_text(cls, text: str, name: str = _TEXT_NAME) -> Self:
        return cls(name=name, size=len(text.encode("utf-8")), source=text)

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> Self:
        return cls(name=name, size=len(data), source=bytes(data))

    @classmethod
    def from_path(cls, path: Path | str) -> Self:
        """
        Describe a file without reading it.

        The size comes from the filesystem so oversized files can be rejected
        before any byte is loaded.
        """
        path = Path(path)
        return cls(name=path.name, size=path.stat().st_size, source=path)

    async def read(self) -> str | bytes:
        """Load the payload, reading files off the event loop."""
        if isinstance(self.source, Path):
            return await asyncio.to_thread(self.source.read_bytes)
        return self.source


@dataclass(frozen=True, kw_only=True)
class EncryptedPack:
    """
    An encrypted item held by an encryption session until upload.

    Attributes:
        obfuscated_id: Random short identifier, unrelated to the name.
        name: Display name of the plaintext item (never transmitted in clear).
        size: Ciphertext length in bytes, used for quota accounting.
        ciphertext: Opaque encrypted bytes as produced by the crypto engine.
    """

    obfuscated_id: str
    name: str
    size: int
    ciphertext: bytes = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class DecryptedItem:
    """
    A decrypted item ready for presentation.

    Attributes:
        name: Original display name.
        size: Original plaintext size as recorded at encryption time.
        data: Plaintext bytes.
        plain_message: True for typed messages, False for files.
    """

    name: str
    size: int
    data: bytes = field(repr=False)
    plain_message: bool = False

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    async def save(self, directory: Path | str) -> Path:
        """
        Write the item into ``directory`` and return the written path.

        Only the base name of the stored name is used, so a crafted name
        cannot escape the target directory.
        """
        directory = Path(directory)
        name = Path(self.name).name or "secret"
        destination = directory / name
        await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(destination.write_bytes, self.data)
        return destination
