"""
Vault Configuration — validated settings and operator key helpers.

Reads settings from environment variables:
    RECORD_VAULT_CIPHER_BACKEND = aesgcm | aescbc
    RECORD_VAULT_LEDGER_PATH = <path to ledger snapshot file>
    RECORD_VAULT_MAX_VALUE_SIZE = <bytes>

No encryption key is ever configured here; keys arrive per call in the
Secret Bundle.

Security Note:
    Never log key material.
"""
import os
import base64
import secrets
import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..records import DEFAULT_MAX_VALUE_SIZE
from .crypto import CIPHER_BACKENDS, IV_SIZE, KEY_LENGTH

logger = logging.getLogger("record_vault.vault")


def generate_key() -> str:
    """Generate a random 32-byte AES-256 key and return it as base64.

    This is a utility for operators and clients building Secret Bundles.

    Returns:
        Base64-encoded 32-byte key string.
    """
    return base64.b64encode(secrets.token_bytes(KEY_LENGTH)).decode("ascii")


def generate_iv() -> str:
    """Generate a random 16-byte IV and return it as base64."""
    return base64.b64encode(secrets.token_bytes(IV_SIZE)).decode("ascii")


def decode_secret(value: str) -> bytes:
    """Decode a base64 secret produced by generate_key/generate_iv.

    Raises:
        ValueError: If value is not valid base64.
    """
    try:
        return base64.b64decode(value, validate=True)
    except ValueError as err:
        raise ValueError("Secret is not valid base64") from err


class VaultConfig(BaseModel):
    """Validated record vault configuration."""

    cipher_backend: str = Field(default="aesgcm")
    ledger_path: Optional[str] = Field(default=None)
    max_value_size: int = Field(
        default=DEFAULT_MAX_VALUE_SIZE, ge=1, le=16 * 1024 * 1024
    )

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        v = v.lower()
        if v not in CIPHER_BACKENDS:
            raise ValueError(f"Unsupported cipher backend: {v}")
        return v

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig by loading values from environment.

        Returns:
            Populated VaultConfig instance.
        """
        settings = {
            "cipher_backend": os.environ.get(
                "RECORD_VAULT_CIPHER_BACKEND", "aesgcm"
            ),
            "ledger_path": os.environ.get("RECORD_VAULT_LEDGER_PATH") or None,
        }
        max_size = os.environ.get("RECORD_VAULT_MAX_VALUE_SIZE")
        if max_size:
            settings["max_value_size"] = max_size
        config = cls(**settings)
        logger.debug(
            "Vault config loaded: backend=%s ledger=%s",
            config.cipher_backend, config.ledger_path or "memory",
        )
        return config
