"""Outbound user notifications."""

from src.saas.core.notifications.account import AccountNotifier

__all__ = ["AccountNotifier"]
