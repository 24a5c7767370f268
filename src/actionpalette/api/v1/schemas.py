# Schemas for request and response bodies used in the API.

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from actionpalette.core.context.snapshot import StaticEditorState
from actionpalette.services.dispatch.dispatcher import DispatchState


# --------- Editor state ---------
class EditorStateIn(BaseModel):
    bufnr: int = 0
    buftype: str = ""
    filetype: str = ""
    mode: str = "n"
    cursor: tuple[int, int] = (1, 1)
    selection_start: tuple[int, int] = (1, 1)
    selection_end: tuple[int, int] = (1, 1)
    lines: list[str] = Field(default_factory=list)  # whole buffer, 1-based lines

    def to_editor_state(self) -> StaticEditorState:
        return StaticEditorState(
            bufnr=self.bufnr,
            buftype=self.buftype,
            filetype=self.filetype,
            mode=self.mode,
            cursor=self.cursor,
            selection_start=self.selection_start,
            selection_end=self.selection_end,
            buffer_lines=tuple(self.lines),
        )


# --------- Actions ---------
class ActionSummary(BaseModel):
    name: str
    strategy: str
    description: str = ""
    mapping: str | None = None
    slash_cmd: str | None = None
    modes: list[str] | None = None
    picker: Any = None


class RegistrationIssueOut(BaseModel):
    name: str
    message: str


class ActionListResponse(BaseModel):
    actions: list[ActionSummary]
    issues: list[RegistrationIssueOut] = []


class VisibleActionsRequest(BaseModel):
    state: EditorStateIn = Field(default_factory=EditorStateIn)


# --------- Dispatch ---------
class DispatchRequest(BaseModel):
    state: EditorStateIn = Field(default_factory=EditorStateIn)
    # answer to the confirmation asked by actions declared with user_prompt
    confirmed: bool = False


class RenderedPromptOut(BaseModel):
    role: str
    text: str


class BlockedPromptOut(BaseModel):
    index: int
    role: str


class NoticeOut(BaseModel):
    message: str
    level: str


class DispatchResponse(BaseModel):
    dispatch_id: str
    action: str
    state: DispatchState
    prompts: list[RenderedPromptOut] = []
    blocked: list[BlockedPromptOut] = []
    output: Any = None
    error: str | None = None
    notices: list[NoticeOut] = []
