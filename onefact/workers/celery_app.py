"""Celery application configuration.

This module configures the Celery application for OneFact background tasks.
Uses Redis as both broker and result backend. Beat runs one collection
pass every ``COLLECTION_INTERVAL``.
"""

from celery import Celery

from onefact.core.config import get_config

_config = get_config()

# Create Celery app
celery_app = Celery(
    "onefact",
    broker=_config.celery_broker_url,
    backend=_config.celery_result_backend,
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=1800,  # 30 minutes hard limit
    task_soft_time_limit=1500,  # 25 minutes soft limit
    # Worker settings
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    # Result settings
    result_expires=86400,  # 24 hours
    # Beat schedule
    beat_schedule={
        "collect-facts": {
            "task": "onefact.workers.collect.collect_facts",
            "schedule": _config.collection_interval,
        },
    },
    task_routes={
        "onefact.workers.collect.*": {"queue": "collect"},
    },
    task_default_queue="default",
)

celery_app.autodiscover_tasks(["onefact.workers"], related_name="collect")

__all__ = ["celery_app"]
