from __future__ import annotations

import time

import pytest

from attendance_bot.core.exceptions import ExternalIOError
from attendance_bot.storage.gateway import PersistenceGateway
from attendance_bot.storage.store import InMemoryStore, Table


class FlakyStore(InMemoryStore):
    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.calls = 0

    def append(self, table, record):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("temporary")
        super().append(table, record)


class HangingStore(InMemoryStore):
    def read(self, table):
        time.sleep(0.5)
        return []


@pytest.mark.asyncio
async def test_retry_recovers_from_one_failure():
    store = FlakyStore(failures=1)
    gateway = PersistenceGateway(store, retries=1, timeout=1.0)

    await gateway.append(Table.ROSTER, {"person_id": "P1"})

    assert store.calls == 2
    assert store.read(Table.ROSTER) == [{"person_id": "P1"}]


@pytest.mark.asyncio
async def test_gives_up_after_bounded_attempts():
    store = FlakyStore(failures=5)
    gateway = PersistenceGateway(store, retries=2, timeout=1.0)

    with pytest.raises(ExternalIOError):
        await gateway.append(Table.ROSTER, {"person_id": "P1"})

    assert store.calls == 3
    assert store.read(Table.ROSTER) == []


@pytest.mark.asyncio
async def test_hung_store_times_out():
    gateway = PersistenceGateway(HangingStore(), retries=0, timeout=0.05)

    with pytest.raises(ExternalIOError):
        await gateway.read(Table.ATTENDANCE)
