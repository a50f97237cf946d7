"""
Marketplace Celery Tasks

Periodic work for jobs awaiting buyer confirmation:
- Warranty nudges on the 1h / 6h / 24h / 72h / 168h schedule
- Auto-closing jobs the buyer never confirmed (no warranty)
"""

import logging

from celery import shared_task


logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, queue="marketplace_tasks")
def nudge_completion_task(self):
    """
    Run one nudge pass over jobs the seller marked complete.

    Returns:
        dict: nudges_sent and jobs_auto_closed for this pass
    """
    try:
        from infrastructure.container import container

        summary = container.nudge_service().run()
        logger.info(
            f"Completion nudge pass: {summary['nudges_sent']} nudges sent, "
            f"{summary['jobs_auto_closed']} jobs auto-closed"
        )
        return summary
    except Exception as exc:
        logger.error(f"Completion nudge pass failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
