# Registration schema for action declarations coming from configuration.

from __future__ import annotations

from collections.abc import Callable
import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from actionpalette.core.actions.action_spec import (
    Action,
    ActionOpts,
    AdapterRef,
    PromptSpec,
    as_predicate,
    as_text_source,
)


class AdapterDecl(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    model: str | None = None


class PromptDecl(BaseModel):
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    role: str = Field(min_length=1)
    content: str | Callable[..., Any]
    contains_code: bool = False
    condition: bool | Callable[..., Any] | None = None

    def to_spec(self) -> PromptSpec:
        return PromptSpec(
            role=self.role,
            content=as_text_source(self.content),
            contains_code=self.contains_code,
            condition=as_predicate(self.condition),
        )


class OptsDecl(BaseModel):
    """
    Known options are typed; unknown keys are kept (model_extra) and handed to
    the strategy as-is.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    mapping: str | None = None
    modes: list[str] | None = None
    slash_cmd: str | None = None
    auto_submit: bool = False
    stop_context_insertion: bool = False
    user_prompt: bool = False
    adapter: AdapterDecl | str | None = None
    placement: str | None = None
    pre_hook: Callable[..., Any] | None = None
    condition: bool | Callable[..., Any] | None = None
    picker: Any = None  # display hints, never interpreted

    @field_validator("modes", mode="before")
    @classmethod
    def _single_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    def to_opts(self) -> ActionOpts:
        adapter = self.adapter
        if isinstance(adapter, str):
            adapter_ref = AdapterRef(name=adapter)
        elif adapter is not None:
            adapter_ref = AdapterRef(name=adapter.name, model=adapter.model)
        else:
            adapter_ref = None

        return ActionOpts(
            mapping=self.mapping,
            modes=frozenset(self.modes) if self.modes is not None else None,
            slash_cmd=self.slash_cmd,
            auto_submit=self.auto_submit,
            stop_context_insertion=self.stop_context_insertion,
            user_prompt=self.user_prompt,
            adapter=adapter_ref,
            placement=self.placement,
            pre_hook=self.pre_hook,
            condition=as_predicate(self.condition),
            picker=copy.deepcopy(self.picker),
            extra=copy.deepcopy(dict(self.model_extra or {})),
        )


class ActionDecl(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    strategy: str = Field(min_length=1)
    description: str = ""
    opts: OptsDecl = Field(default_factory=OptsDecl)
    prompts: list[PromptDecl] = Field(default_factory=list)

    def to_action(self) -> Action:
        return Action(
            name=self.name,
            strategy=self.strategy,
            description=self.description,
            opts=self.opts.to_opts(),
            prompts=tuple(p.to_spec() for p in self.prompts),
        )
