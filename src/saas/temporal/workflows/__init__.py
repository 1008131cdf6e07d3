from src.saas.temporal.workflows.session_cleanup import SessionCleanupWorkflow

__all__ = ["SessionCleanupWorkflow"]
