import os

import pytest

from record_vault.ledger import Ledger, MemoryLedger
from record_vault.records import RecordStore
from record_vault.vault.crypto import CryptoProvider
from record_vault.vault.encrypted_store import EncryptedRecordStore


class TrackingLedger(MemoryLedger):
    """MemoryLedger that records every get/put call."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def put(self, key, value):
        self.calls.append(("put", key))
        super().put(key, value)

    def get(self, key):
        self.calls.append(("get", key))
        return super().get(key)


class FaultyLedger(Ledger):
    """Ledger whose every operation fails."""

    def put(self, key, value):
        raise IOError("disk full")

    def get(self, key):
        raise IOError("connection lost")


@pytest.fixture
def ledger():
    return TrackingLedger()


@pytest.fixture
def store(ledger):
    return RecordStore(ledger)


@pytest.fixture
def faulty_store():
    return RecordStore(FaultyLedger())


@pytest.fixture(params=["aesgcm", "aescbc"])
def provider(request):
    return CryptoProvider(request.param)


@pytest.fixture
def encrypted(store, provider):
    return EncryptedRecordStore(store, provider)


@pytest.fixture
def key():
    return os.urandom(32)


@pytest.fixture
def iv():
    return os.urandom(16)
