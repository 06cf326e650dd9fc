from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from seatwatch.extensions import db


@dataclass(frozen=True)
class NotificationRequest:
    """One user waiting for the next open seat"""
    recipient_email: str
    enqueued_at: datetime
    id: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'recipient_email': self.recipient_email,
            'enqueued_at': self.enqueued_at.isoformat() if self.enqueued_at else None,
        }


class PendingNotification(db.Model):
    """Queued notification request, removed once it is dispatched"""
    __tablename__ = 'pending_notifications'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), nullable=False)
    enqueued_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<PendingNotification {self.id}: {self.email}>'

    def to_request(self):
        return NotificationRequest(recipient_email=self.email, enqueued_at=self.enqueued_at, id=self.id)
