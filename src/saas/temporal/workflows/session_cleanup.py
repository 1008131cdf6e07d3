"""
Session Cleanup Workflow.

Deletes sessions past their expiry. Tokens for those sessions are already
rejected at request time; this only reclaims the rows.

Designed to run on a schedule (see SESSION_CLEANUP_SCHEDULE).
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.saas.temporal.activities import cleanup_expired_sessions


@workflow.defn
class SessionCleanupWorkflow:
    @workflow.run
    async def run(self) -> dict[str, int]:
        workflow.logger.info("Starting session cleanup")

        deleted = await workflow.execute_activity(
            cleanup_expired_sessions,
            start_to_close_timeout=timedelta(minutes=5),
            retry_policy=RetryPolicy(
                maximum_attempts=3,
                initial_interval=timedelta(seconds=2),
            ),
        )

        workflow.logger.info(f"Session cleanup complete: {deleted} deleted")
        return {"sessions": deleted}
