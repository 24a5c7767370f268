# actionpalette/contracts/services/strategy.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from actionpalette.core.actions.action_spec import Action, ActionOpts
    from actionpalette.core.context.snapshot import Context
    from actionpalette.core.prompts.renderer import RenderedPrompt


class Strategy(Protocol):
    """
    Execution strategy selected by an action's `strategy` tag.

    Receives the fully rendered, immutable prompt sequence, the action's full
    opts (auto_submit, stop_context_insertion, adapter, placement, extra keys)
    and the pre-hook's resource handle (None when there is no pre-hook).

    Whatever it returns is passed back to the caller of dispatch(); it may be
    an awaitable if the strategy works asynchronously.
    """

    def invoke(
        self,
        prompts: Sequence[RenderedPrompt],
        opts: ActionOpts,
        handle: Any | None,
    ) -> Any: ...


@dataclass(frozen=True)
class StrategyRequest:
    """
    Everything the dispatcher hands to a strategy, in one record. Strategies
    that only implement `invoke` never see it; the sidecar payload uses it.
    """

    action: Action
    context: Context
    prompts: tuple[RenderedPrompt, ...]
    opts: ActionOpts
    handle: Any | None = None
