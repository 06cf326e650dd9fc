"""
Open-seat detection.

Malformed snapshots (no seats, or a seat count different from the deployment's)
count as "no open seat" instead of raising, so partial sensor data never
aborts a dispatch.
"""
from typing import List, Optional

from seatwatch.sensors.models import SeatState


def is_well_formed(snapshot, seat_count: Optional[int] = None) -> bool:
    seats = getattr(snapshot, 'seats', None)
    if not seats:
        return False
    if seat_count is not None and len(seats) != seat_count:
        return False
    return True


def has_open_seat(snapshot, seat_count: Optional[int] = None) -> bool:
    """True iff at least one seat in the snapshot is Empty"""
    if not is_well_formed(snapshot, seat_count):
        return False
    return any(state == SeatState.EMPTY.value for state in snapshot.seats)


def open_seats(snapshot, seat_count: Optional[int] = None) -> List[int]:
    """1-based numbers of the Empty seats"""
    if not is_well_formed(snapshot, seat_count):
        return []
    return [i for i, state in enumerate(snapshot.seats, start=1) if state == SeatState.EMPTY.value]
