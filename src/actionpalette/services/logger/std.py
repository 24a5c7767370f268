from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import logging
import logging.handlers

from typing import Optional, Mapping, TYPE_CHECKING

from .base import LoggerService, LogContext
from .formatters import SafeFormatter, JsonFormatter

if TYPE_CHECKING:
    from actionpalette.config.settings import PaletteSettings


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _level(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Sinks and formats for the `actionpalette` logger tree.

    A console sink is always installed. When `log_dir` is set, a rotating file
    sink is added as well, written as JSON lines if `use_json` is on.
    `per_namespace_levels` tunes single namespaces, e.g.
    {"actionpalette.conditions": "DEBUG"} to see predicates that raised.
    """
    root_ns: str = "actionpalette"
    level: str = "INFO"
    log_dir: Optional[str] = None
    use_json: bool = False
    per_namespace_levels: Optional[Mapping[str, str]] = None
    console_pattern: str = "%(asctime)s %(levelname)s \t%(name)s    dispatch=%(dispatch_id)s    action=%(action)s - %(message)s"
    file_pattern: str = "%(asctime)s %(levelname)s %(name)s %(dispatch_id)s %(action)s %(strategy)s %(message)s"
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    @staticmethod
    def from_cfg(cfg: "PaletteSettings") -> "LoggingConfig":
        return LoggingConfig(
            root_ns="actionpalette",
            level=cfg.logging.level,
            log_dir=cfg.logging.log_dir,
            use_json=cfg.logging.json_logs,
            per_namespace_levels=dict(cfg.logging.namespace_levels) or None,
        )


class ContextAdapter(logging.LoggerAdapter):
    """Adds dispatch context to every record; per-call `extra` wins on conflict."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


class StdLoggerService(LoggerService):
    """
    stdlib logging behind the LoggerService contract. Dispatch loggers live
    under `actionpalette.dispatch` and carry dispatch_id / action / strategy.
    """

    def __init__(self, base: logging.Logger, *, cfg: LoggingConfig):
        self._base = base
        self._cfg = cfg

    @property
    def config(self) -> LoggingConfig:
        return self._cfg

    # --- LoggerService interface ---

    def base(self) -> logging.Logger:
        return self._base

    def for_namespace(self, ns: str) -> logging.Logger:
        return self._base.getChild(ns)

    def with_context(self, logger: logging.Logger, ctx: LogContext) -> logging.LoggerAdapter:
        return ContextAdapter(logger, ctx.as_extra())

    def for_dispatch(self, *, dispatch_id: str, action: str, strategy: Optional[str] = None) -> logging.LoggerAdapter:
        base = self.for_namespace("dispatch")
        return self.with_context(base, LogContext(dispatch_id=dispatch_id, action=action, strategy=strategy))

    # --- builder ---

    @staticmethod
    def build(cfg: Optional[LoggingConfig] = None) -> "StdLoggerService":
        """
        (Re)configure the `actionpalette` logger tree. Safe to call again after
        a settings reload: previous sinks are closed and replaced.
        """
        cfg = cfg or LoggingConfig()
        level = _level(cfg.level)

        root = logging.getLogger(cfg.root_ns)
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        root.setLevel(level)
        root.propagate = False

        for ns, lvl in (cfg.per_namespace_levels or {}).items():
            logging.getLogger(ns).setLevel(_level(lvl))

        for handler in _sinks(cfg):
            handler.setLevel(level)
            root.addHandler(handler)

        return StdLoggerService(root, cfg=cfg)

    @staticmethod
    def default() -> "StdLoggerService":
        """Wrap the `actionpalette` logger without touching its handlers."""
        return StdLoggerService(logging.getLogger("actionpalette"), cfg=LoggingConfig())


def _sinks(cfg: LoggingConfig) -> list[logging.Handler]:
    console = logging.StreamHandler()
    console.setFormatter(SafeFormatter(cfg.console_pattern))
    sinks: list[logging.Handler] = [console]

    if cfg.log_dir:
        _ensure_dir(Path(cfg.log_dir))
        rotating = logging.handlers.RotatingFileHandler(
            Path(cfg.log_dir) / f"{cfg.root_ns}.log",
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        rotating.setFormatter(JsonFormatter() if cfg.use_json else SafeFormatter(cfg.file_pattern))
        sinks.append(rotating)

    return sinks
