from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

# Visual mode tags: charwise, linewise, blockwise (<C-v>)
VISUAL_MODES = frozenset({"v", "V", "\x16"})
NORMAL_MODE = "n"


class EditorState(Protocol):
    """
    Read-only view of the host editor, queried once per invocation.

    Lines and columns are 1-based. `selection_start` / `selection_end` are the
    raw marks as the editor reports them; they may be reversed when the user
    selected upwards.
    """

    @property
    def bufnr(self) -> int: ...
    @property
    def buftype(self) -> str: ...
    @property
    def filetype(self) -> str: ...
    @property
    def mode(self) -> str: ...
    @property
    def cursor(self) -> tuple[int, int]: ...
    @property
    def selection_start(self) -> tuple[int, int]: ...
    @property
    def selection_end(self) -> tuple[int, int]: ...

    def get_lines(self, start: int, end: int) -> list[str]: ...


@dataclass(frozen=True)
class StaticEditorState:
    """
    Plain EditorState for hosts that already hold the data (sidecar API, tests).

    `buffer_lines` is the whole buffer; `get_lines` slices it inclusively.
    """

    bufnr: int = 0
    buftype: str = ""
    filetype: str = ""
    mode: str = NORMAL_MODE
    cursor: tuple[int, int] = (1, 1)
    selection_start: tuple[int, int] = (1, 1)
    selection_end: tuple[int, int] = (1, 1)
    buffer_lines: tuple[str, ...] = ()

    def get_lines(self, start: int, end: int) -> list[str]:
        return list(self.buffer_lines[max(start - 1, 0) : end])


@dataclass(frozen=True)
class Context:
    """
    Immutable capture of the editor at the moment an action was invoked.

    Every condition and content function of one dispatch sees the same
    instance.
    """

    bufnr: int
    buftype: str
    filetype: str
    mode: str
    cursor: tuple[int, int]

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    is_normal: bool
    is_visual: bool

    lines: tuple[str, ...] = field(default_factory=tuple)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def has_selection(self) -> bool:
        return self.is_visual and bool(self.lines)


def _ordered(
    start: tuple[int, int], end: tuple[int, int]
) -> tuple[tuple[int, int], tuple[int, int]]:
    # tuples compare line first, then column
    return (start, end) if start <= end else (end, start)


def _slice_selection(
    lines: list[str], mode: str, start_col: int, end_col: int
) -> tuple[str, ...]:
    if not lines:
        return ()

    if mode == "V":
        return tuple(lines)

    if mode == "\x16":
        lo, hi = sorted((start_col, end_col))
        return tuple(line[lo - 1 : hi] for line in lines)

    # charwise: trim the first and last line to the selected columns
    out = list(lines)
    if len(out) == 1:
        out[0] = out[0][start_col - 1 : end_col]
    else:
        out[0] = out[0][start_col - 1 :]
        out[-1] = out[-1][:end_col]
    return tuple(out)


def capture(editor_state: EditorState) -> Context:
    """
    Take a Context snapshot from the editor.

    Only reads from `editor_state`. For visual modes the selection is
    normalized (start before end) and its literal text is read; for every other
    mode the selection collapses onto the cursor and `lines` is empty.
    """
    mode = editor_state.mode
    is_visual = mode in VISUAL_MODES
    cursor = tuple(editor_state.cursor)

    if is_visual:
        (start_line, start_col), (end_line, end_col) = _ordered(
            tuple(editor_state.selection_start), tuple(editor_state.selection_end)
        )
        raw = editor_state.get_lines(start_line, end_line)
        lines = _slice_selection(list(raw), mode, start_col, end_col)
    else:
        start_line, start_col = cursor
        end_line, end_col = cursor
        lines = ()

    return Context(
        bufnr=editor_state.bufnr,
        buftype=editor_state.buftype,
        filetype=editor_state.filetype,
        mode=mode,
        cursor=cursor,
        start_line=start_line,
        start_col=start_col,
        end_line=end_line,
        end_col=end_col,
        is_normal=mode == NORMAL_MODE,
        is_visual=is_visual,
        lines=lines,
    )
