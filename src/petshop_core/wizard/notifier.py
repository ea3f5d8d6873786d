"""
User-facing notification capability for the onboarding wizard.

The wizard never talks to a toast system directly; it is handed an object
implementing ``Notifier``. ``LoggingNotifier`` is the default and simply
writes notifications to the package log.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Presentation hooks the wizard calls on success and failure."""

    def notify_success(self, title: str, description: Optional[str] = None) -> None:
        ...

    def notify_error(self, title: str, description: Optional[str] = None) -> None:
        ...

    def celebrate(self) -> None:
        ...


class LoggingNotifier:
    """Notifier that records every notification in the log."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._logger = log or logger

    def notify_success(self, title: str, description: Optional[str] = None) -> None:
        self._logger.info(self._format(title, description))

    def notify_error(self, title: str, description: Optional[str] = None) -> None:
        self._logger.warning(self._format(title, description))

    def celebrate(self) -> None:
        self._logger.debug("Celebration triggered")

    @staticmethod
    def _format(title: str, description: Optional[str]) -> str:
        if description:
            return f"{title}: {description}"
        return title
