"""Notification channel used to mirror every decision."""

from .interfaces import Notifier
from .telegram import LogNotifier, TelegramNotifier

__all__ = ["Notifier", "LogNotifier", "TelegramNotifier"]
