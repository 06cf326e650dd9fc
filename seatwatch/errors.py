"""
Error taxonomy for the seat-availability dispatcher.

Every error here is recoverable from the dispatcher's point of view: it turns
them into a DispatchOutcome and leaves the queue and snapshot store consistent.
"""


class SeatWatchError(Exception):
    """Base class for all SeatWatch errors"""


class NoDataError(SeatWatchError):
    """No seat snapshot has ever been recorded"""


class UnavailableError(SeatWatchError):
    """The snapshot store failed or did not answer within the timeout"""


class MailDeliveryError(SeatWatchError):
    """Transport-level failure while sending an email"""

    def __init__(self, recipient, message):
        super().__init__(f"{recipient}: {message}")
        self.recipient = recipient


class InvalidEmailError(SeatWatchError):
    """A registration email address is not syntactically valid"""
