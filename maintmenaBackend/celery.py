"""
Celery app for MaintMENA.

One queue (``marketplace_tasks``) and one periodic job: the completion nudge
pass, which reminds buyers to confirm finished jobs and auto-closes the ones
they never confirm.
"""

import os

from celery import Celery


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "maintmenaBackend.settings")

app = Celery("maintmenaBackend")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

NUDGE_INTERVAL_SECONDS = int(os.environ.get("MAINTMENA_NUDGE_INTERVAL_SECONDS", 60 * 60))

app.conf.beat_schedule = {
    "nudge-completion": {
        "task": "marketplace.tasks.nudge_completion_task",
        "schedule": float(NUDGE_INTERVAL_SECONDS),
        # a pass that waited longer than a quarter interval is superseded by the next one
        "options": {"expires": NUDGE_INTERVAL_SECONDS / 4, "queue": "marketplace_tasks"},
    },
}

app.conf.update(
    task_routes={"marketplace.tasks.*": {"queue": "marketplace_tasks"}},
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=60 * 60 * 24,
    # nudge passes are idempotent per threshold
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=10 * 60,
    task_soft_time_limit=8 * 60,
    worker_max_tasks_per_child=1000,
)
