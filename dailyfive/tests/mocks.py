import threading

from dailyfive.features.store import MemoryStore


class CountingStore(MemoryStore):
    """MemoryStore that records every insert."""

    def __init__(self):
        super().__init__()
        self.inserts = []

    def insert(self, table, row):
        self.inserts.append(table)
        return super().insert(table, row)


class RacingStore(CountingStore):
    """
    Simulates a concurrent assigner: the first lookup of a daily set misses,
    and another writer inserts the winning row just before our insert.
    """

    def __init__(self, winner_row):
        super().__init__()
        self.winner_row = winner_row
        self.raced = False

    def query_one(self, table, filters):
        if table == "daily_task_sets" and not self.raced:
            self.raced = True
            MemoryStore.insert(self, table, self.winner_row)
            return None
        return super().query_one(table, filters)


class BrokenStore(MemoryStore):
    """Updates and increments fail like an unreachable backend; inserts still succeed."""

    def __init__(self, error):
        super().__init__()
        self.error = error

    def update(self, table, filters, patch):
        raise self.error

    def increment(self, table, filters, column, delta, floor=0):
        raise self.error


class InterleavingStore(MemoryStore):
    """
    Holds every caller that looks up a user's daily set at a barrier, so all
    of them read the same state before any of them writes.
    """

    def __init__(self, parties):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)
        self.armed = False

    def query_one(self, table, filters):
        row = super().query_one(table, filters)
        if self.armed and table == "daily_task_sets" and "user_id" in filters:
            self.barrier.wait()
        return row
