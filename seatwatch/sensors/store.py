"""
Snapshot storage backends.

The sensor integration writes snapshots, the dispatcher only reads the latest
one. SQL storage is used in deployments; the in-memory store serves
single-process setups and tests.
"""
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from seatwatch.extensions import db
from seatwatch.sensors.models import SeatSnapshot, SeatSnapshotRecord


class SnapshotStore(ABC):

    @abstractmethod
    def latest(self) -> Optional[SeatSnapshot]:
        """Return the most recent snapshot, or None if none was ever recorded"""

    @abstractmethod
    def record(self, seats: List[str]) -> SeatSnapshot:
        """Store a new snapshot and return it"""


class SqlSnapshotStore(SnapshotStore):
    """Snapshots kept in the `seat_snapshots` table.

    Each call opens its own app context so the store can be used from worker
    threads (the sensor reader runs reads off the request thread).
    """

    def __init__(self, app):
        self.app = app

    def latest(self):
        with self.app.app_context():
            record = (SeatSnapshotRecord.query
                      .order_by(SeatSnapshotRecord.recorded_at.desc(), SeatSnapshotRecord.id.desc())
                      .first())
            return record.to_snapshot() if record else None

    def record(self, seats):
        with self.app.app_context():
            record = SeatSnapshotRecord(seats=list(seats), recorded_at=datetime.utcnow())
            db.session.add(record)
            db.session.commit()
            return record.to_snapshot()


class InMemorySnapshotStore(SnapshotStore):

    def __init__(self, seats=None):
        self._lock = threading.Lock()
        self._latest = None
        if seats is not None:
            self.record(seats)

    def latest(self):
        return self._latest

    def record(self, seats):
        snapshot = SeatSnapshot(seats=list(seats), recorded_at=datetime.utcnow())
        with self._lock:
            self._latest = snapshot
        return snapshot
