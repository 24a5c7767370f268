from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from actionpalette.core.actions.action_spec import ActionOpts
from actionpalette.core.prompts.renderer import RenderedPrompt
from actionpalette.services.dispatch.strategies import CHAT, INLINE, SAVED_CHATS, StrategyRegistry

_SCALARS = (str, int, float, bool, type(None))


def json_safe(value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, dict):
        return {str(k): json_safe(v) for k, v in value.items() if not callable(v)}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [json_safe(v) for v in value if not callable(v)]
    return repr(value)


def public_opts(opts: ActionOpts) -> dict[str, Any]:
    """The serializable part of ActionOpts (callables are dropped)."""
    out: dict[str, Any] = {
        "mapping": opts.mapping,
        "modes": sorted(opts.modes) if opts.modes is not None else None,
        "slash_cmd": opts.slash_cmd,
        "auto_submit": opts.auto_submit,
        "stop_context_insertion": opts.stop_context_insertion,
        "user_prompt": opts.user_prompt,
        "adapter": (
            {"name": opts.adapter.name, "model": opts.adapter.model} if opts.adapter else None
        ),
        "placement": opts.placement,
        "picker": json_safe(opts.picker),
    }
    for key, value in opts.extra.items():
        if not callable(value):
            out[key] = json_safe(value)
    return out


@dataclass
class HandoffStrategy:
    """
    Strategy that performs nothing itself and returns the normalized payload,
    for hosts that run the real chat / inline / session UI on their side of
    the sidecar API.
    """

    tag: str

    def invoke(
        self,
        prompts: Sequence[RenderedPrompt],
        opts: ActionOpts,
        handle: Any | None,
    ) -> dict[str, Any]:
        return {
            "strategy": self.tag,
            "prompts": [p.as_dict() for p in prompts],
            "opts": public_opts(opts),
            "handle": json_safe(handle),
        }


def handoff_strategies() -> StrategyRegistry:
    return StrategyRegistry({tag: HandoffStrategy(tag) for tag in (CHAT, INLINE, SAVED_CHATS)})
