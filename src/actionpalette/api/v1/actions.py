# /actions, /slash

import dataclasses
import inspect

from fastapi import APIRouter, Depends, HTTPException

from actionpalette.core.actions.action_spec import Action
from actionpalette.core.context.snapshot import capture
from actionpalette.services.dispatch.dispatcher import DispatchResult
from actionpalette.services.notify.notifier import CollectingNotifier, LoggingNotifier
from actionpalette.plugins.strategies.handoff import json_safe
from actionpalette.services.palette import Palette

from .deps import PresetConfirmer, get_palette
from .schemas import (
    ActionListResponse,
    ActionSummary,
    BlockedPromptOut,
    DispatchRequest,
    DispatchResponse,
    NoticeOut,
    RegistrationIssueOut,
    RenderedPromptOut,
    VisibleActionsRequest,
)

router = APIRouter(tags=["actions"])


def _summary(action: Action) -> ActionSummary:
    return ActionSummary(
        name=action.name,
        strategy=action.strategy,
        description=action.description,
        mapping=action.opts.mapping,
        slash_cmd=action.opts.slash_cmd,
        modes=sorted(action.opts.modes) if action.opts.modes is not None else None,
        picker=json_safe(action.opts.picker),
    )


@router.get("/actions", response_model=ActionListResponse)
async def list_actions(palette: Palette = Depends(get_palette)) -> ActionListResponse:  # noqa: B008
    """
    Every registered action in declaration order, plus the build issues.
    """
    registry = palette.registry
    return ActionListResponse(
        actions=[_summary(a) for a in registry],
        issues=[RegistrationIssueOut(name=i.name, message=i.message) for i in registry.issues],
    )


@router.post("/actions/visible", response_model=ActionListResponse)
async def visible_actions(
    body: VisibleActionsRequest,
    palette: Palette = Depends(get_palette),  # noqa: B008
) -> ActionListResponse:
    actions = palette.visible(body.state.to_editor_state())
    return ActionListResponse(actions=[_summary(a) for a in actions])


async def _dispatch(palette: Palette, action: Action, body: DispatchRequest) -> DispatchResponse:
    context = capture(body.state.to_editor_state())
    if not palette.registry.is_visible(action, context):
        raise HTTPException(status_code=403, detail=f"'{action.name}' is not available here")

    # per-request dispatcher: its own confirmation answer and notice buffer
    notifier = CollectingNotifier(forward=LoggingNotifier())
    dispatcher = dataclasses.replace(
        palette.dispatcher,
        confirmer=PresetConfirmer(confirmed=body.confirmed),
        notifier=notifier,
    )
    result: DispatchResult = dispatcher.dispatch(action, context)

    output = result.output
    if inspect.isawaitable(output):
        output = await output

    return DispatchResponse(
        dispatch_id=result.dispatch_id,
        action=result.action,
        state=result.state,
        prompts=[RenderedPromptOut(role=p.role, text=p.text) for p in result.prompts],
        blocked=[BlockedPromptOut(index=b.index, role=b.role) for b in result.blocked],
        output=output,
        error=str(result.error) if result.error is not None else None,
        notices=[NoticeOut(message=n.message, level=n.level) for n in notifier.drain()],
    )


@router.post("/actions/{name}/dispatch", response_model=DispatchResponse)
async def dispatch_action(
    name: str,
    body: DispatchRequest,
    palette: Palette = Depends(get_palette),  # noqa: B008
) -> DispatchResponse:
    action = palette.registry.get(name)
    if action is None:
        raise HTTPException(status_code=404, detail="Action not found")
    return await _dispatch(palette, action, body)


@router.post("/slash/{cmd}", response_model=DispatchResponse)
async def run_slash_command(
    cmd: str,
    body: DispatchRequest,
    palette: Palette = Depends(get_palette),  # noqa: B008
) -> DispatchResponse:
    action = palette.registry.find_by_slash_cmd(cmd)
    if action is None:
        raise HTTPException(status_code=404, detail=f"Unknown command '/{cmd}'")
    return await _dispatch(palette, action, body)
