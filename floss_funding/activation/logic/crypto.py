# activation/logic/crypto.py
"""
Namespace-keyed decryption of hex activation tokens.

Wire convention (frozen: issued tokens must keep decrypting identically):
- key: ASCII bytes of the MD5 hex digest of the namespace string (32 bytes),
- plaintext frame: the word PKCS#7-padded to 32 bytes (words up to 31 bytes),
- cipher: AES-256-CBC with an all-zero 16 byte IV, no further padding,
- token: hex encoding of the 32 byte ciphertext (64 hex characters).

For words of 16..31 bytes the frame equals plain PKCS#7 over AES blocks, so
tokens from block-padded issuers decrypt identically.
"""
from __future__ import annotations

import hashlib
from threading import RLock
from typing import Dict, Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from floss_funding.core.exceptions.errors import DecryptionFailure

ZERO_IV = bytes(16)
BLOCK_SIZE_BITS = algorithms.AES.block_size
FRAME_BYTES = 32


def namespace_key(namespace: str) -> bytes:
    """Derive the 32 byte AES key for *namespace*."""
    return hashlib.md5(namespace.encode("utf-8"), usedforsecurity=False).hexdigest().encode("ascii")


class CryptoDecryptor:
    """Decrypts activation tokens; keys are memoized per namespace."""

    def __init__(self) -> None:
        self._keys: Dict[str, bytes] = {}
        self._lock = RLock()

    def _key_for(self, namespace: str) -> bytes:
        with self._lock:
            key = self._keys.get(namespace)
            if key is None:
                key = namespace_key(namespace)
                self._keys[namespace] = key
            return key

    def decrypt(self, hex_ciphertext: str, namespace: str) -> Optional[str]:
        """
        Return the plaintext word hidden in *hex_ciphertext*.

        Returns None for empty input. Malformed hex raises ValueError;
        a padding or encoding failure raises DecryptionFailure. Callers
        treat both as "not decryptable".
        """
        if not hex_ciphertext:
            return None

        try:
            raw = bytes.fromhex(hex_ciphertext)
        except ValueError as exc:
            raise ValueError(f"activation token is not valid hex: {exc}") from exc
        if not raw or len(raw) % (BLOCK_SIZE_BITS // 8):
            raise DecryptionFailure("ciphertext length is not a multiple of the AES block size")

        decryptor = Cipher(algorithms.AES(self._key_for(namespace)), modes.CBC(ZERO_IV)).decryptor()
        padded = decryptor.update(raw) + decryptor.finalize()

        unpadder = padding.PKCS7(FRAME_BYTES * 8).unpadder()
        try:
            plain = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionFailure("bad padding") from exc

        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionFailure("plaintext is not UTF-8") from exc
