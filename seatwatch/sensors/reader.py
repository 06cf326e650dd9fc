import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from sqlalchemy.exc import SQLAlchemyError

from seatwatch.errors import NoDataError, UnavailableError

logger = logging.getLogger(__name__)


class SensorReader:
    """Read-only access to the latest seat snapshot, bounded by a timeout.

    The store is queried on a worker thread so a hung database never blocks
    the caller for longer than `timeout` seconds.
    """

    def __init__(self, store, timeout: float = 5.0, max_workers: int = 4):
        self.store = store
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='sensor-reader')

    def current(self):
        """Return the latest SeatSnapshot.

        Raises NoDataError when nothing was ever recorded and UnavailableError
        when the store fails or times out.
        """
        future = self._executor.submit(self.store.latest)
        try:
            snapshot = future.result(timeout=self.timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.error(f"Sensor store did not answer within {self.timeout}s")
            raise UnavailableError(f"snapshot store timed out after {self.timeout}s")
        except SQLAlchemyError as e:
            logger.error(f"Sensor store error: {e}")
            raise UnavailableError(str(e)) from e
        except OSError as e:
            logger.error(f"Sensor store unreachable: {e}")
            raise UnavailableError(str(e)) from e

        if snapshot is None:
            raise NoDataError("no seat snapshot has been recorded yet")
        return snapshot

    def shutdown(self):
        self._executor.shutdown(wait=False)
