import pytest

from actionpalette.contracts.errors import ContentResolutionError
from actionpalette.core.actions.action_spec import Computed, Dynamic, Literal, PromptSpec, Static
from actionpalette.core.context.snapshot import StaticEditorState, capture
from actionpalette.core.prompts.helpers import code_block, selection_text
from actionpalette.core.prompts.renderer import RenderedPrompt, render, render_all

LINES = ("local x = 1", "return x")


@pytest.fixture
def ctx():
    state = StaticEditorState(
        filetype="lua",
        mode="V",
        selection_start=(1, 1),
        selection_end=(2, 1),
        buffer_lines=LINES,
    )
    return capture(state)


def test_literal_content_is_used_as_is(ctx):
    outcome = render(PromptSpec(role="system", content=Literal("hello")), ctx, True)
    assert outcome.status == "rendered"
    assert outcome.prompt == RenderedPrompt(role="system", text="hello")


def test_computed_content_uses_context(ctx):
    spec = PromptSpec(
        role="system",
        content=Computed(lambda c: "Act as a " + c.filetype + " expert"),
    )
    assert render(spec, ctx, True).prompt.text == "Act as a lua expert"


def test_condition_false_filters_without_error(ctx):
    spec = PromptSpec(role="user", content=Literal("x"), condition=Static(False))
    outcome = render(spec, ctx, True)
    assert outcome.status == "filtered"
    assert outcome.dropped


def test_code_prompt_blocked_when_sending_disabled(ctx):
    spec = PromptSpec(role="user", content=Literal("<code>"), contains_code=True)

    blocked = render(spec, ctx, False)
    assert blocked.status == "blocked"
    assert blocked.prompt is None

    allowed = render(spec, ctx, True)
    assert allowed.prompt == RenderedPrompt(role="user", text="<code>")


def test_code_prompt_with_false_condition_is_filtered_not_blocked(ctx):
    spec = PromptSpec(
        role="user", content=Literal("<code>"), contains_code=True, condition=Static(False)
    )
    assert render(spec, ctx, False).status == "filtered"


def test_render_all_preserves_order_and_leaves_no_placeholder(ctx):
    p1 = PromptSpec(role="system", content=Literal("one"))
    p2 = PromptSpec(role="user", content=Literal("two"), condition=lambda c: False)
    p3 = PromptSpec(role="user", content=Literal("three"))

    seq = render_all([p1, p2, p3], ctx, True)
    assert [p.text for p in seq.prompts] == ["one", "three"]
    assert seq.blocked == ()


def test_render_all_reports_blocked_prompts(ctx):
    prompts = [
        PromptSpec(role="system", content=Literal("sys")),
        PromptSpec(role="user", content=Literal("<code>"), contains_code=True),
    ]
    seq = render_all(prompts, ctx, False)

    assert [p.text for p in seq.prompts] == ["sys"]
    assert seq.any_blocked
    assert [(b.index, b.role) for b in seq.blocked] == [(1, "user")]


def test_content_and_condition_functions_run_once_in_order(ctx):
    calls = []

    def cond(c):
        calls.append("cond")
        return True

    def content(c):
        calls.append("content")
        return "ok"

    def second(c):
        calls.append("second")
        return "ok2"

    render_all(
        [
            PromptSpec(role="a", content=Computed(content), condition=cond),
            PromptSpec(role="b", content=Computed(second)),
        ],
        ctx,
        True,
    )
    assert calls == ["cond", "content", "second"]


def test_rendering_is_idempotent_for_pure_content(ctx):
    prompts = [
        PromptSpec(role="system", content=Computed(lambda c: f"ft={c.filetype}")),
        PromptSpec(role="user", content=Computed(code_block), contains_code=True),
    ]
    assert render_all(prompts, ctx, True) == render_all(prompts, ctx, True)


def test_raising_content_is_a_hard_error(ctx):
    def boom(_):
        raise KeyError("missing")

    spec = PromptSpec(role="user", content=Computed(boom))
    with pytest.raises(ContentResolutionError) as exc:
        render_all([PromptSpec(role="system", content=Literal("ok")), spec], ctx, True, action="X")

    assert exc.value.index == 1
    assert exc.value.role == "user"
    assert exc.value.action == "X"
    assert isinstance(exc.value.__cause__, KeyError)


def test_non_string_content_is_a_hard_error(ctx):
    spec = PromptSpec(role="user", content=Computed(lambda c: 42))
    with pytest.raises(ContentResolutionError):
        render(spec, ctx, True)


def test_code_block_helper(ctx):
    assert selection_text(ctx) == "local x = 1\nreturn x"
    assert code_block(ctx) == "```lua\nlocal x = 1\nreturn x\n```"
    assert code_block(ctx, with_line_numbers=True) == "```lua\n1:  local x = 1\n2:  return x\n```"


def test_code_block_uses_longer_fence_when_selection_has_one():
    ctx = capture(
        StaticEditorState(
            filetype="markdown",
            mode="V",
            selection_start=(1, 1),
            selection_end=(3, 1),
            buffer_lines=("```", "x", "```"),
        )
    )
    block = code_block(ctx)
    assert block.startswith("````markdown\n")
    assert block.endswith("\n````")


def test_raising_prompt_condition_filters_like_false(ctx):
    def boom(c):
        raise RuntimeError("broken predicate")

    raising = PromptSpec(role="user", content=Literal("hidden"), condition=Dynamic(boom))
    falsy = PromptSpec(role="user", content=Literal("hidden"), condition=Static(False))

    assert render(raising, ctx, True) == render(falsy, ctx, True)
    assert render(raising, ctx, True).status == "filtered"

    seq = render_all(
        [
            PromptSpec(role="system", content=Literal("one")),
            raising,
            PromptSpec(role="user", content=Literal("three")),
        ],
        ctx,
        True,
    )
    assert [p.text for p in seq.prompts] == ["one", "three"]
    assert seq.blocked == ()
