"""
Wire payload codec.

The wire payload is a MessagePack array of bin objects: one opaque ciphertext per
pack, in order, with no names or other metadata attached.
"""

from collections.abc import Sequence

import msgpack

from passer.exceptions import CorruptedPayloadError


def encode(buffers: Sequence[bytes]) -> bytes:
    """
    Serialize an ordered sequence of byte buffers.

    Args:
        buffers: Ciphertexts in upload order.

    Returns:
        Wire payload bytes.
    """
    return msgpack.packb([bytes(buffer) for buffer in buffers], use_bin_type=True)


def decode(data: bytes) -> list[bytes]:
    """
    Parse a wire payload back into its byte buffers.

    Either the whole sequence is returned or nothing is.

    Args:
        data: Downloaded payload bytes.

    Returns:
        The buffers, byte-identical and in the order they were encoded.

    Raises:
        CorruptedPayloadError: If ``data`` is not a well-formed array of bin objects.
    """
    try:
        decoded = msgpack.unpackb(data, raw=False)
    except Exception as e:
        msg = f"Payload is not valid MessagePack: {e}"
        raise CorruptedPayloadError(msg, size=len(data)) from e

    if not isinstance(decoded, list):
        msg = f"Expected an array, got {type(decoded).__name__}"
        raise CorruptedPayloadError(msg, size=len(data))
    if not all(isinstance(item, bytes) for item in decoded):
        msg = "Array contains non-binary elements"
        raise CorruptedPayloadError(msg, size=len(data))
    return decoded
