"""
Built-in actions.

Declared in the same shape users write in their own configuration, so they go
through the same validation and merge path as user overrides.
"""

from __future__ import annotations

from actionpalette.core.actions.action_spec import SYSTEM_ROLE, USER_ROLE
from actionpalette.core.context.snapshot import Context
from actionpalette.core.prompts.helpers import code_block, language_expert
from actionpalette.services.dispatch.strategies import CHAT, INLINE, SAVED_CHATS

VISUAL = ["v", "V", "\x16"]


def _explain(ctx: Context) -> str:
    return (
        "Please explain how the following code works:\n\n"
        f"{code_block(ctx, with_line_numbers=True)}"
    )


def _unit_tests(ctx: Context) -> str:
    return (
        f"Please generate unit tests for this {ctx.filetype} code. "
        "Use the testing framework most common for the language and cover edge cases:\n\n"
        f"{code_block(ctx)}"
    )


def _fix(ctx: Context) -> str:
    return (
        "Please fix the following code. Explain what was wrong, then return the corrected "
        "version in a single code block:\n\n"
        f"{code_block(ctx)}"
    )


DEFAULT_ACTIONS: dict[str, dict] = {
    "Chat": {
        "strategy": CHAT,
        "description": "Open a new chat buffer",
        "opts": {
            "slash_cmd": "chat",
            "stop_context_insertion": True,
        },
        "prompts": [
            {"role": SYSTEM_ROLE, "content": language_expert},
            # seed the chat with the selection when there is one
            {
                "role": USER_ROLE,
                "content": lambda ctx: "\n" + code_block(ctx),
                "contains_code": True,
                "condition": lambda ctx: ctx.is_visual,
            },
        ],
    },
    "Open chats": {
        "strategy": SAVED_CHATS,
        "description": "Load a previously saved chat",
        "opts": {"slash_cmd": "chats"},
    },
    "Custom Prompt": {
        "strategy": INLINE,
        "description": "Send a custom prompt to the model",
        "opts": {
            "slash_cmd": "prompt",
            "user_prompt": True,
            "placement": "replace",
        },
        "prompts": [
            {
                "role": SYSTEM_ROLE,
                "content": lambda ctx: (
                    f"I want you to act as a senior {ctx.filetype or 'programming'} developer. "
                    "I will give you specific code examples and ask you questions. "
                    "Answer with code only, without explanations or fences."
                ),
            },
        ],
    },
    "Explain": {
        "strategy": CHAT,
        "description": "Explain how the selected code works",
        "opts": {
            "modes": VISUAL,
            "slash_cmd": "explain",
            "auto_submit": True,
            "stop_context_insertion": True,
        },
        "prompts": [
            {"role": SYSTEM_ROLE, "content": language_expert},
            {"role": USER_ROLE, "content": _explain, "contains_code": True},
        ],
    },
    "Unit Tests": {
        "strategy": INLINE,
        "description": "Generate unit tests for the selected code",
        "opts": {
            "modes": VISUAL,
            "slash_cmd": "tests",
            "auto_submit": True,
            "placement": "new",
        },
        "prompts": [
            {
                "role": SYSTEM_ROLE,
                "content": "You write thorough, idiomatic unit tests. Return only code.",
            },
            {"role": USER_ROLE, "content": _unit_tests, "contains_code": True},
        ],
    },
    "Fix code": {
        "strategy": CHAT,
        "description": "Fix the selected code",
        "opts": {
            "modes": VISUAL,
            "slash_cmd": "fix",
            "auto_submit": True,
            "stop_context_insertion": True,
        },
        "prompts": [
            {"role": SYSTEM_ROLE, "content": language_expert},
            {"role": USER_ROLE, "content": _fix, "contains_code": True},
        ],
    },
}
