"""Record Vault.

String records on a key-addressed ledger, with optional per-call
AES-256 encryption.
"""
from .version import __version__
from .exceptions import (
    RecordVaultError,
    ArgumentError,
    MissingSecretError,
    CryptoInitError,
    StorageWriteError,
    StorageReadError,
    NotFoundError,
    DecryptionError,
    UnsupportedOperationError,
)
from .ledger import Ledger, MemoryLedger, FileLedger, build_ledger
from .records import RecordStore
from .dispatcher import RecordDispatcher, Response

__all__ = [
    "__version__",
    "RecordVaultError",
    "ArgumentError",
    "MissingSecretError",
    "CryptoInitError",
    "StorageWriteError",
    "StorageReadError",
    "NotFoundError",
    "DecryptionError",
    "UnsupportedOperationError",
    "Ledger",
    "MemoryLedger",
    "FileLedger",
    "build_ledger",
    "RecordStore",
    "RecordDispatcher",
    "Response",
]
