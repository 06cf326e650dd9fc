"""
Interval trigger for the dispatcher.

Replaces the page-view polling of the old status page: the dispatcher runs on
its own timer, independent of any user request.
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from seatwatch.dispatch.services import get_seatwatch

logger = logging.getLogger(__name__)

JOB_ID = 'seat-dispatch'


def run_dispatch(app):
    """Scheduler job: one dispatch cycle inside an app context"""
    with app.app_context():
        try:
            outcome = get_seatwatch(app).dispatcher.on_trigger('scheduler')
        except Exception as e:
            logger.error(f"Scheduled dispatch failed: {e}")
            return None
        logger.debug(f"Scheduled dispatch finished: {outcome.status.value}")
        return outcome


def start_scheduler(app) -> BackgroundScheduler:
    interval = app.config.get('DISPATCH_INTERVAL_SECONDS', 30)

    scheduler = BackgroundScheduler(daemon=True)
    scheduler.add_job(
        run_dispatch,
        trigger=IntervalTrigger(seconds=interval),
        args=[app],
        id=JOB_ID,
        name='Dispatch seat availability emails',
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.start()
    app.extensions['seatwatch_scheduler'] = scheduler
    logger.info(f"Dispatch scheduler started (every {interval}s)")
    return scheduler
