# actionpalette/contracts/services/host.py
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Literal, Protocol

if TYPE_CHECKING:
    from actionpalette.core.actions.action_spec import Action
    from actionpalette.core.context.snapshot import Context

NoticeLevel = Literal["debug", "info", "warn", "error"]


class Notifier(Protocol):
    """Host notification mechanism (message area, toast, log panel, ...)."""

    def notify(self, message: str, level: NoticeLevel = "info") -> None: ...


class Confirmer(Protocol):
    """
    Interactive confirmation for actions declared with `user_prompt`.

    Returns True to proceed, False to abort the dispatch.
    """

    def confirm(self, action: Action, context: Context) -> bool: ...


class Picker(Protocol):
    """
    The host's selection widget. Receives the visible actions in display order
    and returns the chosen one, or None when the user cancels.
    """

    def pick(self, actions: Sequence[Action], context: Context) -> Action | None: ...
