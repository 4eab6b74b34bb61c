"""Fact collection Celery task.

Runs one collection pass in a worker process. Each task run builds its own
container so clients are bound to the task's event loop.
"""

import asyncio
from typing import Any

from celery import shared_task
from celery.utils.log import get_task_logger

from onefact.core.container import ApplicationContainer
from onefact.services.collector.base import CollectionRun

logger = get_task_logger(__name__)


async def _collect_facts_async() -> CollectionRun:
    container = ApplicationContainer()
    try:
        return await container.pipeline().collect_facts()
    finally:
        await container.http_client().close()
        if container.config().fact_store == "sql":
            await container.db_engine().dispose()


@shared_task(
    bind=True,
    name="onefact.workers.collect.collect_facts",
    max_retries=3,
    default_retry_delay=300,
)
def collect_facts(self) -> dict[str, Any]:
    """Run one collection pass.

    Source and store faults do not fail the task; they are reported in the
    returned summary. Only a crash of the pass itself is retried.

    Returns:
        CollectionRun as dict
    """
    logger.info("Starting fact collection")

    try:
        run = asyncio.run(_collect_facts_async())
    except Exception as exc:
        logger.error(f"Fact collection failed: {exc}", exc_info=True)
        raise self.retry(exc=exc) from exc

    logger.info(
        f"Fact collection complete: {run.stored_count} stored, "
        f"{run.duplicate_count} duplicates, {run.fault_count} faults"
    )
    error = run.to_error()
    if error is not None:
        logger.warning(f"Collection faults: {error}")
    return run.model_dump(mode="json")
