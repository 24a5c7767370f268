__version__ = "0.1.0"

# Core
from .core.context.snapshot import Context, StaticEditorState, capture  # per-invocation editor snapshot
from .core.actions.action_spec import Action, ActionOpts, PromptSpec  # declarative action model
from .core.actions.conditions import evaluate  # visibility predicates
from .core.prompts.renderer import RenderedPrompt, render, render_all  # prompt templating

# Services
from .services.registry.action_registry import ActionRegistry, build, visible
from .services.dispatch.dispatcher import DispatchResult, DispatchState, StrategyDispatcher
from .services.dispatch.strategies import StrategyRegistry
from .services.palette import Palette, build_palette

# Errors
from .contracts.errors import (
    ConfigurationError,
    ContentResolutionError,
    HookError,
    PaletteError,
    RegistrationError,
    UnknownActionError,
)

__all__ = [
    # Core
    "Context", "StaticEditorState", "capture",
    "Action", "ActionOpts", "PromptSpec",
    "evaluate", "RenderedPrompt", "render", "render_all",
    # Services
    "ActionRegistry", "build", "visible",
    "StrategyDispatcher", "DispatchResult", "DispatchState", "StrategyRegistry",
    "Palette", "build_palette",
    # Errors
    "PaletteError", "RegistrationError", "ConfigurationError",
    "ContentResolutionError", "HookError", "UnknownActionError",
]
