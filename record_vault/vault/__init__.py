"""Record Vault — encrypted records keyed on a ledger.

Security Note (Threat Model):
    Encryption keys are supplied per call and never persisted. Decrypted
    values and key bytes exist in process memory for the duration of a
    single operation. A memory dump taken during a call could expose them.
    This is an accepted limitation.
"""

from .bundle import SecretBundle, ENCKEY, DECKEY, IV
from .crypto import CryptoProvider, CipherContext
from .config import VaultConfig, generate_key, generate_iv, decode_secret
from .encrypted_store import EncryptedRecordStore

__all__ = [
    "SecretBundle",
    "ENCKEY",
    "DECKEY",
    "IV",
    "CryptoProvider",
    "CipherContext",
    "VaultConfig",
    "generate_key",
    "generate_iv",
    "decode_secret",
    "EncryptedRecordStore",
]
