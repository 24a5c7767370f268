from __future__ import annotations

from actionpalette.core.context.snapshot import Context


def selection_text(ctx: Context) -> str:
    return "\n".join(ctx.lines)


def code_block(ctx: Context, *, with_line_numbers: bool = False) -> str:
    """
    Wrap the selected lines in a fenced block tagged with the filetype.

    With `with_line_numbers`, each line is prefixed by its buffer line number,
    starting at `ctx.start_line`.
    """
    if with_line_numbers:
        body = "\n".join(f"{ctx.start_line + i}:  {line}" for i, line in enumerate(ctx.lines))
    else:
        body = selection_text(ctx)

    fence = "```"
    # longer fence when the selection itself contains one
    while fence in body:
        fence += "`"
    return f"{fence}{ctx.filetype}\n{body}\n{fence}"


def language_expert(ctx: Context) -> str:
    lang = ctx.filetype or "programming"
    return f"I want you to act as a senior {lang} developer. I will ask you specific questions and I want you to return concise explanations and codeblock examples."
