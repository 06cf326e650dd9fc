from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from seatwatch.extensions import db


class SeatState(str, Enum):
    """Occupancy state reported by the seat sensors"""
    OCCUPIED = 'Occupied'
    EMPTY = 'Empty'

    @classmethod
    def values(cls):
        return [state.value for state in cls]


@dataclass(frozen=True)
class SeatSnapshot:
    """Point-in-time reading of every seat, in physical seat order.

    States are kept as the raw strings the sensors wrote so that partial or
    unexpected sensor data survives the read and is judged by the detector.
    """
    seats: List[str] = field(default_factory=list)
    recorded_at: Optional[datetime] = None

    def __len__(self):
        return len(self.seats)

    def to_dict(self):
        return {
            'seats': list(self.seats),
            'recorded_at': self.recorded_at.isoformat() if self.recorded_at else None,
        }


class SeatSnapshotRecord(db.Model):
    """Snapshot row written by the sensor integration"""
    __tablename__ = 'seat_snapshots'

    id = db.Column(db.Integer, primary_key=True)
    seats = db.Column(db.JSON, nullable=False)  # ["Occupied", "Empty", ...]
    recorded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<SeatSnapshotRecord {self.id}: {self.seats}>'

    def to_snapshot(self):
        return SeatSnapshot(seats=list(self.seats or []), recorded_at=self.recorded_at)
