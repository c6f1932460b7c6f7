"""
Vault Crypto Core — AES-256 cipher contexts built per call.

A ``CryptoProvider`` is created once per process for a configured backend
and handed to the encrypted record store. For every call it builds a fresh
``CipherContext`` bound to the caller's key and optional IV:

- ``aesgcm`` (default): AES-256-GCM, authenticated. The ledger key is bound
  as associated data.
  Format: [nonce_len 1B][nonce 12B or 16B][encrypted_payload + GCM_tag 16B]
- ``aescbc``: AES-256-CBC with PKCS7 padding, unauthenticated.
  Format: [iv 16B][encrypted_payload]

When no IV is supplied a random one is generated and stored with the
ciphertext. When an IV is supplied on decrypt it must match the stored one.

Security Note:
    Never log plaintext, ciphertext, keys or IVs.
    Supplying the same IV for two GCM encryptions under the same key breaks
    GCM confidentiality; callers reusing a fixed IV should use random ones.
    With ``aescbc`` a wrong key can decrypt to garbage instead of failing.
"""
import os
import hmac
import logging
from abc import ABC, abstractmethod
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..exceptions import CryptoInitError, DecryptionError

logger = logging.getLogger("record_vault.vault")

KEY_LENGTH = 32  # AES-256
IV_SIZE = 16  # AES block size
NONCE_SIZE = 12  # 96-bit GCM nonce
GCM_NONCE_SIZES = (NONCE_SIZE, IV_SIZE)
TAG_SIZE = 16


class CipherContext(ABC):
    """Transient cipher bound to one key and (optionally) one IV."""

    algorithm: str = ""

    def __init__(self, key: bytes, iv: Optional[bytes] = None):
        if not isinstance(key, (bytes, bytearray)):
            raise CryptoInitError("Encryption key must be bytes")
        if len(key) != KEY_LENGTH:
            raise CryptoInitError(
                f"Invalid key length for {self.algorithm}: expected "
                f"{KEY_LENGTH} bytes, got {len(key)}"
            )
        if iv is not None and not isinstance(iv, (bytes, bytearray)):
            raise CryptoInitError("IV must be bytes")
        self._key = bytes(key)
        self._iv = bytes(iv) if iv else None
        self._check_iv()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.algorithm}>"

    @abstractmethod
    def _check_iv(self) -> None:
        """Raise CryptoInitError if the supplied IV has an invalid length."""

    def _check_stored_iv(self, stored: bytes) -> None:
        if self._iv is not None and not hmac.compare_digest(self._iv, stored):
            raise DecryptionError("IV does not match the stored ciphertext")

    @abstractmethod
    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        """Return the ciphertext (with its IV) for plaintext."""

    @abstractmethod
    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        """Return the plaintext, raising DecryptionError on failure."""


class AESGCMContext(CipherContext):
    """AES-256-GCM context; wrong key, IV or associated data fails decryption."""

    algorithm = "AES-256-GCM"

    def _check_iv(self) -> None:
        if self._iv is not None and len(self._iv) not in GCM_NONCE_SIZES:
            raise CryptoInitError(
                f"Invalid IV length for {self.algorithm}: expected one of "
                f"{GCM_NONCE_SIZES} bytes, got {len(self._iv)}"
            )

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        nonce = self._iv or os.urandom(NONCE_SIZE)
        ct = AESGCM(self._key).encrypt(nonce, plaintext, associated_data)
        return bytes([len(nonce)]) + nonce + ct

    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        if not ciphertext:
            raise DecryptionError("ciphertext is empty")
        nonce_len = ciphertext[0]
        if nonce_len not in GCM_NONCE_SIZES:
            raise DecryptionError("ciphertext has an invalid nonce header")
        _min = 1 + nonce_len + TAG_SIZE
        if len(ciphertext) < _min:
            raise DecryptionError(
                f"ciphertext too short: {len(ciphertext)} bytes "
                f"(minimum {_min})"
            )
        nonce = ciphertext[1:1 + nonce_len]
        self._check_stored_iv(nonce)
        try:
            return AESGCM(self._key).decrypt(
                nonce, ciphertext[1 + nonce_len:], associated_data,
            )
        except InvalidTag as err:
            raise DecryptionError(
                "ciphertext failed authentication (wrong key or IV?)"
            ) from err


class AESCBCContext(CipherContext):
    """AES-256-CBC with PKCS7 padding and the IV prepended to the ciphertext.

    Associated data is accepted for interface compatibility and ignored.
    """

    algorithm = "AES-256-CBC"

    def _check_iv(self) -> None:
        if self._iv is not None and len(self._iv) != IV_SIZE:
            raise CryptoInitError(
                f"Invalid IV length for {self.algorithm}: expected "
                f"{IV_SIZE} bytes, got {len(self._iv)}"
            )

    def encrypt(self, plaintext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        iv = self._iv or os.urandom(IV_SIZE)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        return iv + encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes, associated_data: Optional[bytes] = None) -> bytes:
        if len(ciphertext) < 2 * IV_SIZE or len(ciphertext) % IV_SIZE:
            raise DecryptionError(
                f"ciphertext has invalid length: {len(ciphertext)} bytes"
            )
        iv = ciphertext[:IV_SIZE]
        self._check_stored_iv(iv)
        decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext[IV_SIZE:]) + decryptor.finalize()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as err:
            raise DecryptionError("invalid padding (wrong key?)") from err


CIPHER_BACKENDS: dict[str, type[CipherContext]] = {
    "aesgcm": AESGCMContext,
    "aescbc": AESCBCContext,
}


class CryptoProvider:
    """Builds cipher contexts for one configured backend.

    Created once and injected; it holds no key material.
    """

    def __init__(self, backend: str = "aesgcm"):
        backend = backend.lower()
        if backend not in CIPHER_BACKENDS:
            raise ValueError(f"Unsupported cipher backend: {backend}")
        self._backend = backend
        self._context_cls = CIPHER_BACKENDS[backend]

    def __repr__(self) -> str:
        return f"<CryptoProvider backend={self._backend}>"

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def authenticated(self) -> bool:
        return self._context_cls is AESGCMContext

    def new_cipher(self, key: bytes, iv: Optional[bytes] = None) -> CipherContext:
        """Build a fresh cipher context.

        Raises:
            CryptoInitError: If the key or IV has an invalid type or length.
        """
        return self._context_cls(key, iv)
