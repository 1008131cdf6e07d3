"""
Temporal Worker - separate process from the API.

Run with:
    python -m src.saas.temporal.worker
"""

import asyncio

from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleSpec,
    ScheduleUpdate,
    ScheduleUpdateInput,
)
from temporalio.worker import Worker

from src.saas.core.config import get_settings
from src.saas.core.db import dispose_engine
from src.saas.core.logging import get_logger, setup_logging
from src.saas.temporal.activities import cleanup_expired_sessions
from src.saas.temporal.client import get_temporal_client, reset_temporal_client
from src.saas.temporal.workflows import SessionCleanupWorkflow

logger = get_logger(__name__)

SESSION_CLEANUP_SCHEDULE_ID = "session-cleanup"


def build_session_cleanup_schedule(cron: str, task_queue: str) -> Schedule:
    return Schedule(
        action=ScheduleActionStartWorkflow(
            SessionCleanupWorkflow.run,
            id=f"{SESSION_CLEANUP_SCHEDULE_ID}-run",
            task_queue=task_queue,
        ),
        spec=ScheduleSpec(cron_expressions=[cron]),
    )


async def ensure_session_cleanup_schedule(client: Client, cron: str, task_queue: str) -> None:
    """Create the cleanup schedule, or update it if it already exists."""
    schedule = build_session_cleanup_schedule(cron, task_queue)
    try:
        await client.create_schedule(SESSION_CLEANUP_SCHEDULE_ID, schedule)
        logger.info("Session cleanup schedule created", cron=cron)
    except ScheduleAlreadyRunningError:
        handle = client.get_schedule_handle(SESSION_CLEANUP_SCHEDULE_ID)

        async def _update(_: ScheduleUpdateInput) -> ScheduleUpdate:
            return ScheduleUpdate(schedule=schedule)

        await handle.update(_update)
        logger.info("Session cleanup schedule updated", cron=cron)


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.debug)

    client = await get_temporal_client()

    if settings.session_cleanup_schedule:
        await ensure_session_cleanup_schedule(
            client, settings.session_cleanup_schedule, settings.temporal_task_queue
        )

    worker = Worker(
        client,
        task_queue=settings.temporal_task_queue,
        workflows=[SessionCleanupWorkflow],
        activities=[cleanup_expired_sessions],
        max_concurrent_activities=50,
        max_concurrent_workflow_tasks=50,
    )
    logger.info("Starting worker", task_queue=settings.temporal_task_queue)
    try:
        await worker.run()
    finally:
        reset_temporal_client()
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
