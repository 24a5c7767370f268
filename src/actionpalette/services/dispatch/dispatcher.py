# actionpalette/services/dispatch/dispatcher.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Any
from uuid import uuid4

from actionpalette.contracts.errors import (
    ConfigurationError,
    ContentResolutionError,
    HookError,
    PaletteError,
)
from actionpalette.contracts.services.host import Confirmer, Notifier
from actionpalette.contracts.services.strategy import StrategyRequest
from actionpalette.core.actions.action_spec import Action
from actionpalette.core.context.snapshot import Context
from actionpalette.core.prompts.renderer import BlockedPrompt, RenderedPrompt, render_all
from actionpalette.services.logger.base import LoggerService
from actionpalette.services.logger.std import StdLoggerService
from actionpalette.services.notify.notifier import LoggingNotifier

from .strategies import StrategyRegistry


class DispatchState(str, Enum):
    idle = "idle"
    confirm_pending = "confirm_pending"
    hook_run = "hook_run"
    rendering = "rendering"
    dispatched = "dispatched"
    aborted = "aborted"
    failed = "failed"


@dataclass
class DispatchEvent:
    """
    Lightweight event emitted on every state transition of one dispatch.

    Useful for logging / UI progress.
    """

    state: DispatchState
    action: str
    dispatch_id: str
    message: str | None = None

    # For failures
    error: Exception | None = None


@dataclass
class DispatchResult:
    """
    Structured result of one dispatch.

    - state: the terminal state reached (dispatched, aborted or failed).
    - request: what was handed to the strategy (only when dispatched).
    - output: the strategy's return value (may be an awaitable).
    - blocked: prompts dropped by the code-sending policy.
    - error: the failure, when state is failed.
    """

    state: DispatchState
    action: str
    dispatch_id: str
    request: StrategyRequest | None = None
    output: Any = None
    blocked: tuple[BlockedPrompt, ...] = ()
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state == DispatchState.dispatched

    @property
    def prompts(self) -> tuple[RenderedPrompt, ...]:
        return self.request.prompts if self.request is not None else ()


@dataclass
class StrategyDispatcher:
    """
    Run one action end to end:

        Idle -> ConfirmPending (user_prompt) -> HookRun -> Rendering
             -> Dispatched | Aborted | Failed

    Guarantees:
      - An unknown strategy fails before confirmation or the pre-hook run.
      - A declined confirmation aborts with no side effects and no report.
      - A content error fails the dispatch; the strategy never receives a
        partial prompt sequence.
      - Prompts dropped by the code-sending policy are reported once per
        dispatch and the dispatch continues without them.

    Failures are reported through the notifier and returned, never raised.
    """

    strategies: StrategyRegistry
    send_code: bool = True
    confirmer: Confirmer | None = None
    notifier: Notifier = field(default_factory=LoggingNotifier)
    logger_service: LoggerService = field(default_factory=StdLoggerService.default)

    def dispatch(
        self,
        action: Action,
        context: Context,
        *,
        on_event: Callable[[DispatchEvent], None] | None = None,
    ) -> DispatchResult:
        dispatch_id = uuid4().hex[:12]
        log = self.logger_service.for_dispatch(
            dispatch_id=dispatch_id, action=action.name, strategy=action.strategy
        )

        def emit(state: DispatchState, message: str | None = None, error: Exception | None = None):
            self._emit(
                on_event,
                DispatchEvent(
                    state=state,
                    action=action.name,
                    dispatch_id=dispatch_id,
                    message=message,
                    error=error,
                ),
            )

        def fail(error: Exception) -> DispatchResult:
            log.warning("Dispatch failed: %s", error)
            self.notifier.notify(f"[{action.name}] {error}", "error")
            emit(DispatchState.failed, message=str(error), error=error)
            return DispatchResult(
                state=DispatchState.failed,
                action=action.name,
                dispatch_id=dispatch_id,
                error=error,
            )

        emit(DispatchState.idle, message=f"Dispatching '{action.name}' via '{action.strategy}'.")

        # 1) strategy lookup comes first: no side effects for a misconfigured action
        try:
            handler = self.strategies.require(action.strategy)
        except ConfigurationError as e:
            return fail(e)

        # 2) interactive confirmation
        if action.opts.user_prompt:
            emit(DispatchState.confirm_pending)
            if self.confirmer is None:
                return fail(
                    ConfigurationError(
                        f"Action '{action.name}' requires confirmation but no confirmer is configured"
                    )
                )
            if not self.confirmer.confirm(action, context):
                log.info("Dispatch declined by user")
                emit(DispatchState.aborted, message="Declined by user.")
                return DispatchResult(
                    state=DispatchState.aborted, action=action.name, dispatch_id=dispatch_id
                )

        # 3) pre-hook (may have host side effects)
        handle: Any | None = None
        if action.opts.pre_hook is not None:
            emit(DispatchState.hook_run)
            try:
                handle = action.opts.pre_hook(context)
            except Exception as e:
                return fail(HookError(f"pre_hook of '{action.name}' raised: {e}"))

        # 4) render prompts in declaration order against the same snapshot
        emit(DispatchState.rendering)
        try:
            rendered = render_all(action.prompts, context, self.send_code, action=action.name)
        except ContentResolutionError as e:
            return fail(e)

        if rendered.any_blocked:
            roles = ", ".join(f"#{b.index} ({b.role})" for b in rendered.blocked)
            self.notifier.notify(
                f"[{action.name}] Code sending is disabled; skipped prompt(s) {roles}",
                "warn",
            )

        # 5) hand off to the strategy
        request = StrategyRequest(
            action=action,
            context=context,
            prompts=rendered.prompts,
            opts=action.opts.detached(),
            handle=handle,
        )
        try:
            output = handler.invoke(request.prompts, request.opts, request.handle)
        except PaletteError as e:
            return fail(e)
        except Exception as e:
            log.exception("Strategy '%s' raised", action.strategy)
            return fail(e)

        log.info("Dispatched %d prompt(s)", len(request.prompts))
        emit(DispatchState.dispatched, message=f"Handed {len(request.prompts)} prompt(s) to '{action.strategy}'.")
        return DispatchResult(
            state=DispatchState.dispatched,
            action=action.name,
            dispatch_id=dispatch_id,
            request=request,
            output=output,
            blocked=rendered.blocked,
        )

    @staticmethod
    def _emit(on_event: Callable[[DispatchEvent], None] | None, event: DispatchEvent) -> None:
        if on_event is None:
            return
        try:
            on_event(event)
        except Exception:
            logging.getLogger("actionpalette.dispatch").debug(
                "on_event callback raised", exc_info=True
            )
