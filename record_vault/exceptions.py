"""
Record Vault Errors.

Every failure raised by the record store, the encrypted adapter and the
dispatcher derives from ``RecordVaultError``.

Security Note:
    Error messages name namespaces, ids and operations only. Never put key,
    IV, plaintext or ciphertext bytes into an exception message.
"""


class RecordVaultError(Exception):
    """Base class for all record vault errors."""


class ArgumentError(RecordVaultError):
    """Wrong number of arguments, or a component violating the key policy."""


class MissingSecretError(RecordVaultError):
    """A required secret label is absent from the Secret Bundle."""


class CryptoInitError(RecordVaultError):
    """A cipher context could not be built (bad key or IV length)."""


class StorageWriteError(RecordVaultError):
    """The ledger rejected a put."""


class StorageReadError(RecordVaultError):
    """The ledger reported a fault on get."""


class NotFoundError(RecordVaultError):
    """No record is stored under the requested key."""


class DecryptionError(RecordVaultError):
    """Ciphertext failed the integrity, padding or format check."""


class UnsupportedOperationError(RecordVaultError):
    """The dispatcher received an unknown operation name."""
