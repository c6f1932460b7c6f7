"""
Record Dispatcher — routes a named operation to the record stores.

Each invocation carries a function name, positional string arguments and a
transient secret mapping. The dispatcher checks the Secret Bundle and the
argument count before anything touches the ledger, then turns the outcome
into a ``Response``.
"""
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, Union

from pydantic import BaseModel

from .exceptions import RecordVaultError, UnsupportedOperationError
from .ledger import Ledger, build_ledger
from .records import RecordStore, check_arity
from .vault.bundle import DECKEY, ENCKEY, SecretBundle
from .vault.config import VaultConfig
from .vault.crypto import CryptoProvider
from .vault.encrypted_store import EncryptedRecordStore

logger = logging.getLogger("record_vault")

OK = 200
ERROR = 500


class Response(BaseModel):
    """Caller-visible result of an invocation."""

    status: int = OK
    message: str = ""
    payload: Optional[bytes] = None

    @property
    def ok(self) -> bool:
        return self.status < 400

    @classmethod
    def success(cls, payload: Optional[bytes] = None) -> "Response":
        return cls(status=OK, payload=payload)

    @classmethod
    def error(cls, message: str) -> "Response":
        return cls(status=ERROR, message=message)


class RecordDispatcher:
    """Maps addRecord/getRecord/encRecord/decRecord to the stores."""

    def __init__(self, store: RecordStore, provider: CryptoProvider):
        self._store = store
        self._encrypted = EncryptedRecordStore(store, provider)
        self._handlers = {
            "addRecord": self._add_record,
            "getRecord": self._get_record,
            "encRecord": self._enc_record,
            "decRecord": self._dec_record,
        }

    @classmethod
    def from_config(
        cls,
        config: Optional[VaultConfig] = None,
        ledger: Optional[Ledger] = None,
    ) -> "RecordDispatcher":
        """Build ledger, store and crypto provider from configuration.

        Args:
            config: Vault settings; loaded from the environment if omitted.
            ledger: Ledger to use instead of the configured one.
        """
        config = config or VaultConfig.from_env()
        if ledger is None:
            ledger = build_ledger(config.ledger_path)
        store = RecordStore(ledger, max_value_size=config.max_value_size)
        provider = CryptoProvider(config.cipher_backend)
        logger.info(
            "Record dispatcher ready: cipher=%s", provider.backend,
        )
        return cls(store, provider)

    @property
    def operations(self) -> list[str]:
        return list(self._handlers)

    def init(self) -> Response:
        """Instantiation hook; there is no state to initialize."""
        return Response.success()

    def invoke(
        self,
        function: str,
        args: Sequence[str],
        transient: Union[Mapping[str, Any], SecretBundle, None] = None,
    ) -> Response:
        """Run one operation and wrap its outcome.

        Args:
            function: Operation name.
            args: Positional string arguments.
            transient: Secret mapping (ENCKEY/DECKEY/IV) or a SecretBundle.

        Returns:
            Response with the utf-8 result as payload, or an error status.
        """
        try:
            result = self.execute(function, args, transient)
        except RecordVaultError as err:
            logger.warning("Operation %s failed: %s", function, err)
            return Response.error(str(err))
        return Response.success(result.encode("utf-8"))

    def execute(
        self,
        function: str,
        args: Sequence[str],
        transient: Union[Mapping[str, Any], SecretBundle, None] = None,
    ) -> str:
        """Run one operation, raising RecordVaultError on failure."""
        handler = self._handlers.get(function)
        if handler is None:
            raise UnsupportedOperationError(f"Unsupported function {function}")
        return handler(list(args), transient)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    @staticmethod
    def _bundle(transient: Union[Mapping[str, Any], SecretBundle, None]) -> SecretBundle:
        if isinstance(transient, SecretBundle):
            return transient
        return SecretBundle.from_transient(transient)

    def _add_record(self, args: list[str], transient: Any) -> str:
        check_arity("addRecord", args, 4)
        return self._store.add_record(*args)

    def _get_record(self, args: list[str], transient: Any) -> str:
        check_arity("getRecord", args, 2)
        return self._store.get_record(*args)

    def _enc_record(self, args: list[str], transient: Any) -> str:
        secrets = self._bundle(transient)
        secrets.require(ENCKEY, "encRecord")
        check_arity("encRecord", args, 4)
        return self._encrypted.enc_record(*args, secrets)

    def _dec_record(self, args: list[str], transient: Any) -> str:
        secrets = self._bundle(transient)
        secrets.require(DECKEY, "decRecord")
        check_arity("decRecord", args, 2)
        return self._encrypted.dec_record(*args, secrets)
