# actionpalette/services/palette.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging

from actionpalette.config.runtime import get_settings
from actionpalette.config.settings import PaletteSettings
from actionpalette.contracts.services.host import Confirmer, Notifier, Picker
from actionpalette.core.actions.action_spec import Action
from actionpalette.core.context.snapshot import Context, EditorState, capture
from actionpalette.plugins.actions.defaults import DEFAULT_ACTIONS
from actionpalette.services.dispatch.dispatcher import (
    DispatchEvent,
    DispatchResult,
    StrategyDispatcher,
)
from actionpalette.services.dispatch.strategies import StrategyRegistry
from actionpalette.services.logger.base import LoggerService
from actionpalette.services.logger.std import StdLoggerService
from actionpalette.services.notify.notifier import LoggingNotifier
from actionpalette.services.registry.action_registry import ActionRegistry, Declarations, build
from actionpalette.services.registry.loading import load_user_actions

logger = logging.getLogger("actionpalette.palette")


@dataclass
class Palette:
    """
    Invocation surfaces over the registry and the dispatcher.

    Every entry point takes a fresh Context snapshot first and runs the full
    visibility check (modes + condition) before dispatching, including the
    slash-command and key-mapping shortcuts that bypass the picker.
    """

    registry: ActionRegistry
    dispatcher: StrategyDispatcher
    notifier: Notifier

    # --- listing -------------------------------------------------------------

    def visible(self, editor_state: EditorState) -> list[Action]:
        return self.registry.visible(capture(editor_state))

    # --- entry points --------------------------------------------------------

    def open(
        self,
        editor_state: EditorState,
        picker: Picker,
        *,
        on_event: Callable[[DispatchEvent], None] | None = None,
    ) -> DispatchResult | None:
        """
        Palette command: list visible actions, let the host pick one, dispatch it.
        Returns None when nothing is visible or the picker was cancelled.
        """
        context = capture(editor_state)
        actions = self.registry.visible(context)
        if not actions:
            self.notifier.notify("No actions available here", "info")
            return None

        chosen = picker.pick(actions, context)
        if chosen is None:
            logger.debug("Picker cancelled")
            return None
        return self.dispatcher.dispatch(chosen, context, on_event=on_event)

    def run(
        self,
        name: str,
        editor_state: EditorState,
        *,
        on_event: Callable[[DispatchEvent], None] | None = None,
    ) -> DispatchResult | None:
        return self._run_resolved(self.registry.get(name), f"action '{name}'", editor_state, on_event)

    def run_slash_command(
        self,
        cmd: str,
        editor_state: EditorState,
        *,
        on_event: Callable[[DispatchEvent], None] | None = None,
    ) -> DispatchResult | None:
        action = self.registry.find_by_slash_cmd(cmd)
        return self._run_resolved(action, f"command '/{cmd.lstrip('/')}'", editor_state, on_event)

    def run_mapping(
        self,
        keys: str,
        editor_state: EditorState,
        *,
        on_event: Callable[[DispatchEvent], None] | None = None,
    ) -> DispatchResult | None:
        action = self.registry.find_by_mapping(keys)
        return self._run_resolved(action, f"mapping '{keys}'", editor_state, on_event)

    # --- internal ------------------------------------------------------------

    def _run_resolved(
        self,
        action: Action | None,
        label: str,
        editor_state: EditorState,
        on_event: Callable[[DispatchEvent], None] | None,
    ) -> DispatchResult | None:
        if action is None:
            self.notifier.notify(f"Unknown {label}", "warn")
            return None

        context: Context = capture(editor_state)
        if not self.registry.is_visible(action, context):
            self.notifier.notify(f"'{action.name}' is not available here", "warn")
            return None
        return self.dispatcher.dispatch(action, context, on_event=on_event)


def build_palette(
    *,
    strategies: StrategyRegistry,
    defaults: Declarations | None = None,
    overrides: Declarations | None = None,
    settings: PaletteSettings | None = None,
    notifier: Notifier | None = None,
    confirmer: Confirmer | None = None,
    logger_service: LoggerService | None = None,
) -> Palette:
    """
    Wire registry + dispatcher from settings.

    - defaults: built-in declarations (DEFAULT_ACTIONS when None); dropped
      entirely when settings.show_default_actions is False.
    - overrides: user declarations; loaded from settings.user_actions when None.
    """
    settings = settings or get_settings()
    notifier = notifier or LoggingNotifier()

    if defaults is None:
        defaults = DEFAULT_ACTIONS
    if not settings.show_default_actions:
        defaults = {}
    if overrides is None and settings.user_actions:
        overrides = load_user_actions(settings.user_actions)

    registry = build(defaults, overrides, notifier=notifier)
    dispatcher = StrategyDispatcher(
        strategies=strategies,
        send_code=settings.send_code,
        confirmer=confirmer,
        notifier=notifier,
        logger_service=logger_service or StdLoggerService.default(),
    )
    return Palette(registry=registry, dispatcher=dispatcher, notifier=notifier)

