from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal as LiteralType

from actionpalette.contracts.errors import ContentResolutionError
from actionpalette.core.actions.action_spec import Computed, Literal, PromptSpec, TextSource
from actionpalette.core.actions.conditions import evaluate
from actionpalette.core.context.snapshot import Context

RenderStatus = LiteralType["rendered", "filtered", "blocked"]


@dataclass(frozen=True)
class RenderedPrompt:
    role: str
    text: str

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "text": self.text}


@dataclass(frozen=True)
class RenderOutcome:
    """
    Result of rendering one PromptSpec.

    - rendered: `prompt` is set.
    - filtered: the prompt's own condition was false (normal filtering).
    - blocked:  the prompt carries code and code sending is disabled.
    """

    status: RenderStatus
    prompt: RenderedPrompt | None = None

    @property
    def dropped(self) -> bool:
        return self.prompt is None


@dataclass(frozen=True)
class BlockedPrompt:
    index: int
    role: str


@dataclass(frozen=True)
class RenderedSequence:
    prompts: tuple[RenderedPrompt, ...] = ()
    blocked: tuple[BlockedPrompt, ...] = field(default_factory=tuple)

    @property
    def any_blocked(self) -> bool:
        return bool(self.blocked)


def resolve_text(source: TextSource, context: Context) -> str:
    """Single resolution point for literal and computed content."""
    if isinstance(source, Literal):
        return source.text
    if isinstance(source, Computed):
        text = source.fn(context)
        if not isinstance(text, str):
            raise TypeError(f"content function returned {type(text).__name__}, expected str")
        return text
    raise TypeError(f"Unsupported content source: {source!r}")


def render(
    prompt: PromptSpec,
    context: Context,
    send_code: bool,
    *,
    action: str = "",
    index: int = 0,
) -> RenderOutcome:
    """
    Render a single prompt spec against `context`.

    `send_code` is the code-sending policy; it is passed in rather than read
    from settings so rendering depends only on its arguments.

    Raises:
        ContentResolutionError: a computed content raised or returned a
            non-string. Missing content cannot be defaulted.
    """
    if not evaluate(prompt.condition, context):
        return RenderOutcome(status="filtered")

    if prompt.contains_code and not send_code:
        return RenderOutcome(status="blocked")

    try:
        text = resolve_text(prompt.content, context)
    except Exception as e:
        raise ContentResolutionError(action, index, prompt.role, e) from e

    return RenderOutcome(status="rendered", prompt=RenderedPrompt(role=prompt.role, text=text))


def render_all(
    prompts: Sequence[PromptSpec],
    context: Context,
    send_code: bool,
    *,
    action: str = "",
) -> RenderedSequence:
    """
    Render prompts in declaration order. Dropped prompts leave no placeholder;
    blocked ones are listed in `blocked` so the caller can tell the user.
    """
    rendered: list[RenderedPrompt] = []
    blocked: list[BlockedPrompt] = []

    for i, spec in enumerate(prompts):
        outcome = render(spec, context, send_code, action=action, index=i)
        if outcome.status == "blocked":
            blocked.append(BlockedPrompt(index=i, role=spec.role))
        elif outcome.prompt is not None:
            rendered.append(outcome.prompt)

    return RenderedSequence(prompts=tuple(rendered), blocked=tuple(blocked))
