"""
Cryptographic operations for Passer.

This module provides:
- The crypto engine protocol and its AES-256-GCM implementation
- Key generation, key text and link composition
- Zeroing of key material
"""

from passer.crypto.aes_gcm import AesGcmEngine, AesGcmKey
from passer.crypto.key_codec import (
    RESOURCE_ID_LENGTH,
    KeyCodec,
    build_quick_link,
    build_stepped_link,
    split_quick_link,
)
from passer.crypto.key_material import KeyMaterial
from passer.crypto.protocol import CryptoEngine, SecretKey

__all__ = [
    "AesGcmEngine",
    "AesGcmKey",
    "CryptoEngine",
    "KeyCodec",
    "KeyMaterial",
    "RESOURCE_ID_LENGTH",
    "SecretKey",
    "build_quick_link",
    "build_stepped_link",
    "split_quick_link",
]
