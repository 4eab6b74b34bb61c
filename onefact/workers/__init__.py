"""Background workers for OneFact.

Modules:
- scheduler: In-process periodic collection loop
- celery_app: Celery application with the collection beat entry
- collect: Collection Celery task
"""

from onefact.workers.scheduler import CollectionScheduler

__all__ = ["CollectionScheduler"]
