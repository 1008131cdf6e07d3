"""Temporal activities - idempotent, side effects live here rather than in workflows."""

from src.saas.temporal.activities.cleanup import cleanup_expired_sessions

__all__ = ["cleanup_expired_sessions"]
