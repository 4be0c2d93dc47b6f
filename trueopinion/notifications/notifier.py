"""
Notification boundary: the client decides what to tell the user, a
collaborator decides how to show it.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from ..common.messages import Severity
from ..common.utils import get_current_time


@dataclass
class Notification:
    """A message surfaced to the user."""
    severity: Severity
    message: str
    timestamp: datetime = field(default_factory=get_current_time)


class Notifier(ABC):
    """Abstract base class for user notification surfaces"""

    @abstractmethod
    def notify(self, severity: Severity, message: str) -> None:
        """Surface a message with the given severity"""
        pass


class LoggingNotifier(Notifier):
    """Writes notifications to a logger; the default when no UI is attached"""

    LEVELS = {
        Severity.INFO: logging.INFO,
        Severity.SUCCESS: logging.INFO,
        Severity.WARNING: logging.WARNING,
        Severity.ERROR: logging.ERROR,
    }

    def __init__(self, logger_name: str = "trueopinion.notifications"):
        self.logger = logging.getLogger(logger_name)

    def notify(self, severity: Severity, message: str) -> None:
        self.logger.log(self.LEVELS.get(severity, logging.INFO), f"[{severity.value}] {message}")


class CallbackNotifier(Notifier):
    """Forwards notifications to a plain function, e.g. a toast helper"""

    def __init__(self, callback: Callable[[Severity, str], None]):
        self.callback = callback

    def notify(self, severity: Severity, message: str) -> None:
        self.callback(severity, message)


class MemoryNotifier(Notifier):
    """In-memory notifier for development and testing"""

    def __init__(self, max_entries: int = 1000):
        self.notifications: deque = deque(maxlen=max_entries)

    def notify(self, severity: Severity, message: str) -> None:
        self.notifications.append(Notification(severity=severity, message=message))

    def messages(self, severity: Optional[Severity] = None) -> List[str]:
        return [n.message for n in self.notifications if severity is None or n.severity == severity]

    def clear(self) -> None:
        self.notifications.clear()
