from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Protocol, Optional, Mapping, Any
import logging


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged during one dispatch."""

    dispatch_id: Optional[str] = None
    action: Optional[str] = None
    strategy: Optional[str] = None

    def as_extra(self) -> Mapping[str, Any]:
        # unset fields stay off the record; formatters fill in "-"
        return {k: v for k, v in asdict(self).items() if v is not None}


class LoggerService(Protocol):
    """What the dispatcher needs from logging; StdLoggerService is the stdlib one."""

    def base(self) -> logging.Logger: ...
    def for_namespace(self, ns: str) -> logging.Logger: ...
    def with_context(self, logger: logging.Logger, ctx: LogContext) -> logging.LoggerAdapter: ...

    def for_dispatch(self, *, dispatch_id: str, action: str, strategy: Optional[str] = None) -> logging.LoggerAdapter: ...
