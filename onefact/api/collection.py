"""Collection control endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from onefact.api.dependencies import get_scheduler
from onefact.api.schemas import CollectionStatus
from onefact.core.logging import get_logger
from onefact.services.collector.base import CollectionRun
from onefact.workers.scheduler import CollectionScheduler

logger = get_logger(__name__)

router = APIRouter(prefix="/collection", tags=["collection"])

Scheduler = Annotated[CollectionScheduler, Depends(get_scheduler)]


@router.post("/run", response_model=CollectionRun)
async def run_collection(scheduler: Scheduler) -> CollectionRun:
    """Run one collection pass now and return its summary.

    Waits for a pass already in progress before starting.
    """
    logger.info("Manual collection pass requested")
    return await scheduler.pipeline.collect_facts()


@router.get("/status", response_model=CollectionStatus)
async def collection_status(scheduler: Scheduler) -> CollectionStatus:
    return CollectionStatus(
        running=scheduler.is_running,
        interval_seconds=scheduler.interval.total_seconds(),
        pass_count=scheduler.pass_count,
        last_run=scheduler.pipeline.last_run,
    )
