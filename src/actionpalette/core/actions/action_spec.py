from __future__ import annotations

from collections.abc import Callable, Mapping
import copy
from dataclasses import dataclass, field, replace
from typing import Any

from actionpalette.core.context.snapshot import Context

ContentFn = Callable[[Context], str]
ConditionFn = Callable[[Context], Any]
PreHookFn = Callable[[Context], Any]

# Roles used by the built-in actions; hosts may use any other tag.
SYSTEM_ROLE = "system"
USER_ROLE = "user"


# --- content: Literal | Computed ----------------------------------------


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Computed:
    fn: ContentFn


TextSource = Literal | Computed


def as_text_source(raw: str | ContentFn | TextSource) -> TextSource:
    if isinstance(raw, (Literal, Computed)):
        return raw
    if isinstance(raw, str):
        return Literal(raw)
    if callable(raw):
        return Computed(raw)
    raise TypeError(f"content must be a string or a callable, got {type(raw).__name__}")


# --- predicates: Static | Dynamic ----------------------------------------


@dataclass(frozen=True)
class Static:
    value: bool


@dataclass(frozen=True)
class Dynamic:
    fn: ConditionFn


Predicate = Static | Dynamic


def as_predicate(raw: bool | ConditionFn | Predicate | None) -> Predicate | None:
    if raw is None or isinstance(raw, (Static, Dynamic)):
        return raw
    if isinstance(raw, bool):
        return Static(raw)
    if callable(raw):
        return Dynamic(raw)
    raise TypeError(f"condition must be a bool or a callable, got {type(raw).__name__}")


# --- specs ---------------------------------------------------------------


@dataclass(frozen=True)
class PromptSpec:
    """One message-to-be-rendered."""

    role: str
    content: TextSource
    contains_code: bool = False
    condition: Predicate | None = None


@dataclass(frozen=True)
class AdapterRef:
    name: str
    model: str | None = None


@dataclass(frozen=True)
class ActionOpts:
    """
    Recognized action options.

    `picker` and `extra` are opaque to the core: they are carried through to
    the picker and the strategy untouched. Strategies receive a `detached()`
    copy, so whatever they write into it stays local to one dispatch.
    """

    mapping: str | None = None
    modes: frozenset[str] | None = None  # None => every mode
    slash_cmd: str | None = None
    auto_submit: bool = False
    stop_context_insertion: bool = False
    user_prompt: bool = False
    adapter: AdapterRef | None = None
    placement: str | None = None
    pre_hook: PreHookFn | None = None
    condition: Predicate | None = None
    picker: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.extra:
            return self.extra[key]
        return getattr(self, key, default)

    def detached(self) -> ActionOpts:
        return replace(self, extra=copy.deepcopy(dict(self.extra)), picker=copy.deepcopy(self.picker))


@dataclass(frozen=True)
class Action:
    name: str  # registry key
    strategy: str  # strategy tag: chat | inline | saved_chats | ...
    description: str = ""
    opts: ActionOpts = field(default_factory=ActionOpts)
    prompts: tuple[PromptSpec, ...] = ()

    def allows_mode(self, mode: str) -> bool:
        return self.opts.modes is None or mode in self.opts.modes
