from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging
import threading
from typing import Any

from actionpalette.contracts.errors import ConfigurationError
from actionpalette.contracts.services.strategy import Strategy
from actionpalette.core.actions.action_spec import ActionOpts
from actionpalette.core.prompts.renderer import RenderedPrompt

logger = logging.getLogger("actionpalette.strategies")

# Tags of the strategies hosts are expected to provide.
CHAT = "chat"
INLINE = "inline"
SAVED_CHATS = "saved_chats"


@dataclass
class CallbackStrategy:
    """Adapt a plain `fn(prompts, opts, handle)` to the Strategy protocol."""

    fn: Callable[[Sequence[RenderedPrompt], ActionOpts, Any | None], Any]

    def invoke(
        self,
        prompts: Sequence[RenderedPrompt],
        opts: ActionOpts,
        handle: Any | None,
    ) -> Any:
        return self.fn(prompts, opts, handle)


class StrategyRegistry:
    """
    Tag -> handler table. Adding a strategy means registering a handler here;
    the dispatcher never changes.
    """

    def __init__(self, handlers: dict[str, Strategy] | None = None):
        self._handlers: dict[str, Strategy] = {}
        self._lock = threading.RLock()
        for tag, handler in (handlers or {}).items():
            self.register(tag, handler)

    def register(self, tag: str, handler: Strategy | Callable[..., Any]) -> None:
        if not tag:
            raise ValueError("Strategy tag must be a non-empty string")
        if not hasattr(handler, "invoke"):
            if not callable(handler):
                raise TypeError(f"Strategy '{tag}' must implement invoke() or be callable")
            handler = CallbackStrategy(handler)
        with self._lock:
            if tag in self._handlers:
                logger.info("Replacing strategy handler for '%s'", tag)
            self._handlers[tag] = handler

    def unregister(self, tag: str) -> None:
        with self._lock:
            self._handlers.pop(tag, None)

    def get(self, tag: str) -> Strategy | None:
        return self._handlers.get(tag)

    def require(self, tag: str) -> Strategy:
        handler = self._handlers.get(tag)
        if handler is None:
            known = ", ".join(sorted(self._handlers)) or "none"
            raise ConfigurationError(f"Unknown strategy '{tag}' (registered: {known})")
        return handler

    def tags(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, tag: object) -> bool:
        return tag in self._handlers
