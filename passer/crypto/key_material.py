"""Raw key bytes that can be wiped from memory."""

import ctypes
import hmac


def _wipe(buffer: bytearray) -> None:
    if not buffer:
        return
    view = (ctypes.c_char * len(buffer)).from_buffer(buffer)
    ctypes.memset(ctypes.addressof(view), 0, len(buffer))


class KeyMaterial:
    """
    Owned copy of a key's raw bytes.

    The buffer is overwritten with zeros by ``wipe``, after which ``reveal``
    refuses to hand out the bytes.
    """

    __slots__ = ("_buffer", "_wiped")

    def __init__(self, raw: bytes | bytearray) -> None:
        self._buffer = bytearray(raw)
        self._wiped = False

    def __del__(self) -> None:
        self.wipe()

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        if self._wiped:
            return "KeyMaterial(<wiped>)"
        return f"KeyMaterial(<{len(self._buffer)} bytes>)"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyMaterial):
            return NotImplemented
        if self._wiped or other._wiped:
            return False
        return hmac.compare_digest(self._buffer, other._buffer)

    __hash__ = None  # type: ignore[assignment]

    @property
    def wiped(self) -> bool:
        return self._wiped

    def reveal(self) -> bytes:
        """Return an unmanaged copy of the bytes."""
        if self._wiped:
            raise RuntimeError("Key material has been wiped")
        return bytes(self._buffer)

    def wipe(self) -> None:
        """Zero the buffer. Idempotent."""
        if self._wiped:
            return
        _wipe(self._buffer)
        self._wiped = True
