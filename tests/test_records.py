"""
Tests for the plaintext RecordStore and composite key/value helpers.

Tests cover:
- addRecord/getRecord round-trip and primary-field-only reads
- Overwrite semantics
- Not-found and ledger fault translation
- Delimiter and size policy
"""
import pytest

from record_vault.exceptions import (
    ArgumentError,
    NotFoundError,
    StorageReadError,
    StorageWriteError,
)
from record_vault.records import (
    RecordStore,
    check_arity,
    composite_key,
    composite_value,
    primary_field,
)


# --- Test Composite Helpers ---

class TestCompositeHelpers:
    """Tests for key/value serialization."""

    def test_composite_key(self):
        """Test key is namespace:id."""
        assert composite_key("acct", "7") == "acct:7"

    def test_composite_value(self):
        """Test value is field1:field2."""
        assert composite_value("alice", "100") == "alice:100"

    def test_key_rejects_separator(self):
        """Test key components cannot contain ':'."""
        with pytest.raises(ArgumentError):
            composite_key("ac:ct", "7")
        with pytest.raises(ArgumentError):
            composite_key("acct", "7:1")

    def test_key_rejects_empty(self):
        """Test key components cannot be empty."""
        with pytest.raises(ArgumentError):
            composite_key("", "7")
        with pytest.raises(ArgumentError):
            composite_key("acct", "")

    def test_field1_rejects_separator(self):
        """Test field1 cannot contain ':'."""
        with pytest.raises(ArgumentError):
            composite_value("al:ice", "100")

    def test_field2_may_contain_separator(self):
        """Test field2 colons survive because reads split once."""
        value = composite_value("alice", "10:00")
        assert value == "alice:10:00"
        assert primary_field(value) == "alice"

    def test_empty_fields_allowed(self):
        """Test empty fields serialize to a bare separator."""
        assert composite_value("", "") == ":"

    def test_non_string_rejected(self):
        """Test non-string components are rejected."""
        with pytest.raises(ArgumentError):
            composite_key("acct", 7)
        with pytest.raises(ArgumentError):
            composite_value("alice", 100)

    @pytest.mark.parametrize("namespace,id,field1,field2", [
        ("ac\ud800ct", "7", "alice", "100"),
        ("acct", "\udfff", "alice", "100"),
        ("acct", "7", "al\ud800ice", "100"),
        ("acct", "7", "alice", "1\ud800"),
    ])
    def test_non_utf8_components_rejected(self, store, ledger, namespace, id, field1, field2):
        """Test lone surrogates fail with ArgumentError before the ledger."""
        with pytest.raises(ArgumentError, match="UTF-8"):
            store.add_record(namespace, id, field1, field2)
        assert ledger.calls == []

    def test_check_arity(self):
        """Test arity check only accepts the exact count."""
        check_arity("addRecord", ["a", "b", "c", "d"], 4)
        with pytest.raises(ArgumentError, match="expected 4, got 3"):
            check_arity("addRecord", ["a", "b", "c"], 4)


# --- Test Record Store ---

class TestRecordStore:
    """Tests for add_record/get_record."""

    def test_add_returns_value(self, store):
        """Test addRecord returns field1:field2."""
        assert store.add_record("acct", "7", "alice", "100") == "alice:100"

    def test_get_returns_primary_field(self, store):
        """Test getRecord returns only field1."""
        store.add_record("acct", "7", "alice", "100")
        assert store.get_record("acct", "7") == "alice"

    def test_ledger_holds_plaintext(self, store, ledger):
        """Test the plaintext path stores value bytes as-is."""
        store.add_record("acct", "7", "alice", "100")
        assert ledger.get("acct:7") == b"alice:100"

    def test_overwrite(self, store):
        """Test the second write wins."""
        store.add_record("acct", "7", "alice", "100")
        store.add_record("acct", "7", "carol", "200")
        assert store.get_record("acct", "7") == "carol"

    def test_unicode_round_trip(self, store):
        """Test non-ascii fields survive a round-trip."""
        store.add_record("cuentas", "ñ", "José", "€5")
        assert store.get_record("cuentas", "ñ") == "José"

    def test_not_found(self, store):
        """Test reading an unwritten key fails with NotFoundError."""
        with pytest.raises(NotFoundError, match="acct:404"):
            store.get_record("acct", "404")

    def test_empty_value_is_not_found(self, store, ledger):
        """Test an empty ledger value counts as absent."""
        ledger.put("acct:0", b"")
        with pytest.raises(NotFoundError):
            store.get_record("acct", "0")

    def test_write_fault(self, faulty_store):
        """Test a failing put surfaces as StorageWriteError naming the key."""
        with pytest.raises(StorageWriteError, match="acct:7") as exc:
            faulty_store.add_record("acct", "7", "alice", "100")
        assert isinstance(exc.value.__cause__, IOError)

    def test_read_fault(self, faulty_store):
        """Test a failing get surfaces as StorageReadError."""
        with pytest.raises(StorageReadError, match="acct:7"):
            faulty_store.get_record("acct", "7")

    def test_invalid_key_does_not_touch_ledger(self, store, ledger):
        """Test key policy violations fail before any ledger access."""
        with pytest.raises(ArgumentError):
            store.add_record("acct", "7:8", "alice", "100")
        assert ledger.calls == []

    def test_value_size_limit(self, ledger):
        """Test values above max_value_size are rejected before writing."""
        small = RecordStore(ledger, max_value_size=8)
        with pytest.raises(ArgumentError, match="too large"):
            small.add_record("acct", "7", "alice", "1000")
        assert ledger.calls == []

    def test_binary_value_read_fails(self, store, ledger):
        """Test plaintext read of non-text bytes is a read error."""
        ledger.put("acct:9", b"\xff\xfe\x00")
        with pytest.raises(StorageReadError):
            store.get_record("acct", "9")
