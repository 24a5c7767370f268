# actionpalette/__main__.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

from actionpalette.config.loader import load_settings
from actionpalette.contracts.errors import PaletteError
from actionpalette.core.context.snapshot import StaticEditorState, capture
from actionpalette.core.prompts.renderer import render_all
from actionpalette.plugins.strategies.handoff import handoff_strategies
from actionpalette.services.logger.std import LoggingConfig, StdLoggerService
from actionpalette.services.palette import build_palette

"""
actionpalette CLI

Commands:

  1) List the actions visible for a given editor mode / filetype
       python -m actionpalette list --mode v --filetype python

  2) Render an action's prompts against a file selection (what a strategy would receive)
       python -m actionpalette render Explain --file app.py --lines 10:24

     --no-send-code renders with the code-sending policy disabled.

  3) Run the HTTP sidecar for non-Python hosts
       python -m actionpalette serve --port 8765
"""

_FILETYPES = {".py": "python", ".lua": "lua", ".js": "javascript", ".ts": "typescript", ".rs": "rust", ".go": "go"}


def _parse_lines(raw: str) -> tuple[int, int]:
    start, _, end = raw.partition(":")
    return int(start), int(end or start)


def _editor_state(args: argparse.Namespace) -> StaticEditorState:
    lines: tuple[str, ...] = ()
    filetype = args.filetype or ""
    if getattr(args, "file", None):
        path = Path(args.file)
        lines = tuple(path.read_text(encoding="utf-8").splitlines())
        filetype = filetype or _FILETYPES.get(path.suffix, path.suffix.lstrip("."))

    start, end = _parse_lines(args.lines) if getattr(args, "lines", None) else (1, 1)
    mode = args.mode or ("V" if getattr(args, "lines", None) else "n")
    end_col = max(len(lines[end - 1]) if 0 < end <= len(lines) else 1, 1)
    return StaticEditorState(
        filetype=filetype,
        mode=mode,
        cursor=(start, 1),
        selection_start=(start, 1),
        selection_end=(end, end_col),
        buffer_lines=lines,
    )


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]

    parser = argparse.ArgumentParser(prog="actionpalette")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List visible actions.")
    ls.add_argument("--mode", default="n")
    ls.add_argument("--filetype", default="")

    render = sub.add_parser("render", help="Render an action's prompts.")
    render.add_argument("name")
    render.add_argument("--file", default=None)
    render.add_argument("--lines", default=None, help="A:B selection (1-based, inclusive).")
    render.add_argument("--mode", default=None)
    render.add_argument("--filetype", default=None)
    render.add_argument("--no-send-code", action="store_true")

    serve = sub.add_parser("serve", help="Run the HTTP sidecar (blocking).")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    args = parser.parse_args(argv)

    settings = load_settings()
    if args.log_level:
        settings.logging.level = args.log_level.upper()
    StdLoggerService.build(LoggingConfig.from_cfg(settings))

    if args.cmd == "serve":
        import uvicorn

        from actionpalette.server.app_factory import create_app

        app = create_app(cfg=settings)
        uvicorn.run(
            app,
            host=args.host if args.host is not None else settings.server.host,
            port=args.port if args.port is not None else settings.server.port,
            log_level=settings.logging.level.lower(),
        )
        return 0

    try:
        palette = build_palette(strategies=handoff_strategies(), settings=settings)
    except PaletteError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.cmd == "list":
        state = StaticEditorState(mode=args.mode, filetype=args.filetype)
        for action in palette.visible(state):
            slash = f" /{action.opts.slash_cmd}" if action.opts.slash_cmd else ""
            print(f"{action.name}  [{action.strategy}]{slash}  {action.description}")
        for issue in palette.registry.issues:
            print(f"[skipped] {issue.name}: {issue.message}", file=sys.stderr)
        return 0

    if args.cmd == "render":
        action = palette.registry.get(args.name)
        if action is None:
            print(f"error: no action named '{args.name}'", file=sys.stderr)
            return 1
        context = capture(_editor_state(args))
        send_code = settings.send_code and not args.no_send_code
        try:
            rendered = render_all(action.prompts, context, send_code, action=action.name)
        except PaletteError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        out = {
            "action": action.name,
            "strategy": action.strategy,
            "prompts": [p.as_dict() for p in rendered.prompts],
            "blocked": [{"index": b.index, "role": b.role} for b in rendered.blocked],
        }
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
