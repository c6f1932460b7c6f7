"""
Secret Bundle — per-call secrets delivered out-of-band.

The transient mapping handed to the dispatcher carries raw byte secrets
under fixed labels:

    ENCKEY — AES-256 key used by encRecord
    DECKEY — AES-256 key used by decRecord
    IV     — optional initialization vector

Values are held as ``pydantic.SecretBytes`` so they never show up in
``repr()``, logs or error messages. The bundle lives for one call only.
"""
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, SecretBytes

from ..exceptions import ArgumentError, MissingSecretError

ENCKEY = "ENCKEY"
DECKEY = "DECKEY"
IV = "IV"

_LABEL_FIELDS = {
    ENCKEY: "enc_key",
    DECKEY: "dec_key",
    IV: "iv",
}


class SecretBundle(BaseModel):
    """Transient key material for a single operation."""

    enc_key: Optional[SecretBytes] = None
    dec_key: Optional[SecretBytes] = None
    iv: Optional[SecretBytes] = None

    model_config = {"frozen": True}

    @classmethod
    def from_transient(cls, transient: Optional[Mapping[str, Any]]) -> "SecretBundle":
        """Build a bundle from a label → secret mapping.

        ``str`` values are utf-8 encoded; unknown labels are ignored.
        """
        values = {}
        for label, field in _LABEL_FIELDS.items():
            if not transient or label not in transient:
                continue
            secret = transient[label]
            if secret is None:
                continue
            if isinstance(secret, str):
                secret = secret.encode("utf-8")
            elif not isinstance(secret, (bytes, bytearray, memoryview)):
                raise ArgumentError(f"Transient secret {label} must be bytes")
            values[field] = bytes(secret)
        return cls(**values)

    def has(self, label: str) -> bool:
        """True if the bundle holds a secret under label."""
        return getattr(self, _LABEL_FIELDS[label]) is not None

    def require(self, label: str, operation: str) -> bytes:
        """Return the raw secret under label.

        Raises:
            MissingSecretError: If the label is absent.
        """
        secret = getattr(self, _LABEL_FIELDS[label])
        if secret is None:
            kind = "decryption" if label == DECKEY else "encryption"
            raise MissingSecretError(
                f"Expected transient {kind} key {label} for {operation}"
            )
        return secret.get_secret_value()

    def iv_bytes(self) -> Optional[bytes]:
        """Return the raw IV, or None when absent or empty."""
        if self.iv is None:
            return None
        return self.iv.get_secret_value() or None
