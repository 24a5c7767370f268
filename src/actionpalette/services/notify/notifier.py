from __future__ import annotations

from dataclasses import dataclass, field
import logging

from actionpalette.contracts.services.host import Notifier, NoticeLevel

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class LoggingNotifier:
    """Default notifier: writes notices to the `actionpalette.notify` logger."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("actionpalette.notify"))

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        self.logger.log(_LEVELS.get(level, logging.INFO), message)


@dataclass
class Notice:
    message: str
    level: NoticeLevel


@dataclass
class CollectingNotifier:
    """
    Buffers notices so they can be returned to a remote host (sidecar API) or
    inspected in tests. Optionally forwards to another notifier.
    """

    forward: Notifier | None = None
    notices: list[Notice] = field(default_factory=list)

    def notify(self, message: str, level: NoticeLevel = "info") -> None:
        self.notices.append(Notice(message=message, level=level))
        if self.forward is not None:
            self.forward.notify(message, level)

    def drain(self) -> list[Notice]:
        out, self.notices = self.notices, []
        return out
