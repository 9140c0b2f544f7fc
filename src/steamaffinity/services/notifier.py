"""Delivery of one-line summaries when a run finishes."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class LogNotifier:
    """Default notifier: writes the summary to the application log."""
    
    def __call__(self, title: str, message: str) -> None:
        logger.info(f"{title} {message}")


def send_notification(notifier: Optional[Callable[[str, str], None]], title: str, message: str) -> None:
    """Fire-and-forget; a failing notifier is logged and otherwise ignored."""
    if notifier is None:
        return
    try:
        notifier(title, message)
    except Exception as e:
        logger.warning(f"Notification '{title}' could not be delivered: {e}")
