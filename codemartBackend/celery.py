"""
Celery configuration for the Codemart backend.

Only payment housekeeping runs in the background; request handling never
waits on a worker.
"""

import os

from celery import Celery


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "codemartBackend.settings")

app = Celery("codemartBackend")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
app.autodiscover_tasks(["payment_system.Tasks"])

app.conf.beat_schedule = {
    # Orders left in processing by a crashed worker or lost gateway response
    "expire-stale-processing-orders": {
        "task": "payment_system.expire_stale_processing_orders",
        "schedule": 5.0 * 60.0,
        "options": {"expires": 4.0 * 60.0, "queue": "payment_tasks"},
    },
}

app.conf.update(
    task_routes={
        "payment_system.*": {"queue": "payment_tasks"},
    },
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=60 * 60 * 24,
    worker_max_tasks_per_child=1000,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=10 * 60,
    task_soft_time_limit=8 * 60,
)
