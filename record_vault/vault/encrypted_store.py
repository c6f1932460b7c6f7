"""
EncryptedRecordStore — AES-256 confidentiality wrapper around RecordStore.

Provides the encrypted counterparts of the plaintext record operations:
- ``enc_record(namespace, id, field1, field2, secrets)`` — encrypt and put
- ``dec_record(namespace, id, secrets)`` — get, decrypt, return field1

The key (and optional IV) come from the caller's Secret Bundle on every call.
Nothing but ciphertext is written to the ledger.

Security Note:
    Never log plaintext, ciphertext, keys or IVs. Only log ledger keys and
    operations. Plaintext and key bytes live on the call stack of a single
    operation and are not retained by this object.
"""
import logging

from ..exceptions import DecryptionError
from ..records import RecordStore, composite_key, primary_field
from .bundle import DECKEY, ENCKEY, SecretBundle
from .crypto import CryptoProvider

logger = logging.getLogger("record_vault.vault")


class EncryptedRecordStore:
    """Encrypted record reads and writes on top of a RecordStore.

    The crypto provider is injected once and shared by every call; each
    call builds its own cipher context from the Secret Bundle.
    """

    def __init__(self, store: RecordStore, provider: CryptoProvider):
        self._store = store
        self._provider = provider

    @property
    def provider(self) -> CryptoProvider:
        return self._provider

    def enc_record(
        self,
        namespace: str,
        id: str,
        field1: str,
        field2: str,
        secrets: SecretBundle,
    ) -> str:
        """Encrypt ``field1:field2`` and store it under ``namespace:id``.

        Args:
            namespace: Key namespace (no ':').
            id: Key id (no ':').
            field1: Primary field (no ':').
            field2: Secondary field.
            secrets: Bundle holding ENCKEY and optionally IV.

        Returns:
            The plaintext value string that was encrypted.

        Raises:
            MissingSecretError: If ENCKEY is absent.
            CryptoInitError: If the key or IV is invalid.
            StorageWriteError: If the ledger put fails.
        """
        enc_key = secrets.require(ENCKEY, "encRecord")
        cipher = self._provider.new_cipher(enc_key, secrets.iv_bytes())
        key = composite_key(namespace, id)
        value, cleartext = self._store.encode_value(field1, field2)
        ciphertext = cipher.encrypt(cleartext, key.encode("utf-8"))
        self._store.put_state(key, ciphertext)
        logger.debug(
            "Encrypted record stored: key=%s cipher=%s", key, cipher.algorithm,
        )
        return value

    def dec_record(self, namespace: str, id: str, secrets: SecretBundle) -> str:
        """Fetch, decrypt and return the primary field under ``namespace:id``.

        Raises:
            MissingSecretError: If DECKEY is absent.
            CryptoInitError: If the key or IV is invalid.
            NotFoundError: If no record is stored under the key.
            DecryptionError: If the ciphertext fails to decrypt.
        """
        dec_key = secrets.require(DECKEY, "decRecord")
        cipher = self._provider.new_cipher(dec_key, secrets.iv_bytes())
        key = composite_key(namespace, id)
        ciphertext = self._store.get_state(key)
        try:
            cleartext = cipher.decrypt(ciphertext, key.encode("utf-8"))
            value = cleartext.decode("utf-8")
        except DecryptionError as err:
            logger.warning("Decryption failed for key=%s: %s", key, err)
            raise
        except UnicodeDecodeError as err:
            logger.warning("Decrypted record for key=%s is not text", key)
            raise DecryptionError(
                f"Decrypted value for {key} is not valid text (wrong key?)"
            ) from err
        return primary_field(value)
