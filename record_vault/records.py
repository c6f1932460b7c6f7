"""
Record Store — plaintext records keyed by a composite key on a ledger.

A record is addressed by ``(namespace, id)`` and holds ``(field1, field2)``;
both pairs are serialized as ``"<first>:<second>"``. Reads expose only the
primary field (``field1``); ``field2`` is stored but never surfaced by the
read path.

Delimiter policy:
    ``namespace``, ``id`` and ``field1`` must not contain ``:``, and the key
    components must not be empty. ``field2`` may contain colons because reads
    split on the first separator only.
"""
import logging
from collections.abc import Sequence

from .exceptions import (
    ArgumentError,
    NotFoundError,
    StorageReadError,
    StorageWriteError,
)
from .ledger import Ledger

logger = logging.getLogger("record_vault")

SEPARATOR = ":"

DEFAULT_MAX_VALUE_SIZE = 65536


# ---------------------------------------------------------------------------
# Composite key / value helpers
# ---------------------------------------------------------------------------

def check_arity(operation: str, args: Sequence[str], expected: int) -> None:
    """Raise ArgumentError unless exactly ``expected`` arguments were given."""
    if len(args) != expected:
        raise ArgumentError(
            f"Incorrect arguments for {operation}: expected {expected}, "
            f"got {len(args)}"
        )


def _check_text(name: str, value: str) -> None:
    if not isinstance(value, str):
        raise ArgumentError(f"{name} must be a string")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as err:
        raise ArgumentError(f"{name} is not valid UTF-8 text") from err


def _check_component(name: str, value: str, allow_empty: bool = False) -> None:
    _check_text(name, value)
    if not allow_empty and not value:
        raise ArgumentError(f"{name} cannot be empty")
    if SEPARATOR in value:
        raise ArgumentError(f"{name} cannot contain {SEPARATOR!r}")


def composite_key(namespace: str, id: str) -> str:
    """Build the ledger key ``namespace:id``.

    Raises:
        ArgumentError: If a component is empty, contains ':' or is not
            encodable as UTF-8.
    """
    _check_component("namespace", namespace)
    _check_component("id", id)
    return f"{namespace}{SEPARATOR}{id}"


def composite_value(field1: str, field2: str) -> str:
    """Build the record value ``field1:field2``.

    Raises:
        ArgumentError: If field1 contains ':' or a field is not UTF-8 text.
    """
    _check_component("field1", field1, allow_empty=True)
    _check_text("field2", field2)
    return f"{field1}{SEPARATOR}{field2}"


def primary_field(value: str) -> str:
    """Return only the first field of a stored composite value."""
    return value.split(SEPARATOR, 1)[0]


# ---------------------------------------------------------------------------
# Record store
# ---------------------------------------------------------------------------

class RecordStore:
    """Plaintext record persistence on top of a Ledger.

    Writes are a single ``put`` (last writer wins); there is no delete.
    """

    def __init__(
        self,
        ledger: Ledger,
        max_value_size: int = DEFAULT_MAX_VALUE_SIZE,
    ):
        self._ledger = ledger
        self._max_value_size = max_value_size

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def encode_value(self, field1: str, field2: str) -> tuple[str, bytes]:
        """Serialize a composite value, enforcing the size limit.

        Returns:
            Tuple of (value string, utf-8 value bytes).
        """
        value = composite_value(field1, field2)
        data = value.encode("utf-8")
        if len(data) > self._max_value_size:
            raise ArgumentError(
                f"Record value too large: {len(data)} bytes "
                f"(maximum {self._max_value_size})"
            )
        return value, data

    # ------------------------------------------------------------------
    # Byte-level state access
    # ------------------------------------------------------------------

    def put_state(self, key: str, data: bytes) -> None:
        """Write raw bytes under a composite key.

        Raises:
            StorageWriteError: If the ledger put fails.
        """
        try:
            self._ledger.put(key, data)
        except Exception as err:
            logger.error("Ledger put failed for key=%s: %s", key, err)
            raise StorageWriteError(
                f"Failed to set asset: {key}"
            ) from err

    def get_state(self, key: str) -> bytes:
        """Read raw bytes stored under a composite key.

        Raises:
            StorageReadError: If the ledger get fails.
            NotFoundError: If nothing (or an empty value) is stored.
        """
        try:
            data = self._ledger.get(key)
        except Exception as err:
            logger.error("Ledger get failed for key=%s: %s", key, err)
            raise StorageReadError(
                f"Failed to get asset: {key} with error: {err}"
            ) from err
        if not data:
            raise NotFoundError(f"Asset not found: {key}")
        return data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_record(self, namespace: str, id: str, field1: str, field2: str) -> str:
        """Store ``field1:field2`` under ``namespace:id``, overwriting.

        Returns:
            The stored value string.
        """
        key = composite_key(namespace, id)
        value, data = self.encode_value(field1, field2)
        self.put_state(key, data)
        logger.debug("Record added: key=%s", key)
        return value

    def get_record(self, namespace: str, id: str) -> str:
        """Return the primary field of the record under ``namespace:id``."""
        key = composite_key(namespace, id)
        data = self.get_state(key)
        try:
            value = data.decode("utf-8")
        except UnicodeDecodeError as err:
            raise StorageReadError(
                f"Asset {key} does not hold a plaintext record"
            ) from err
        return primary_field(value)
