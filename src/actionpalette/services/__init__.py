# redirect service imports for clean imports
from actionpalette.services.dispatch.dispatcher import (
    DispatchEvent,
    DispatchResult,
    DispatchState,
    StrategyDispatcher,
)
from actionpalette.services.dispatch.strategies import CallbackStrategy, StrategyRegistry
from actionpalette.services.notify.notifier import CollectingNotifier, LoggingNotifier
from actionpalette.services.palette import Palette, build_palette
from actionpalette.services.registry.action_registry import ActionRegistry, build, visible

__all__ = [
    # registry
    'ActionRegistry', 'build', 'visible',
    # dispatch
    'StrategyDispatcher', 'StrategyRegistry', 'CallbackStrategy',
    'DispatchEvent', 'DispatchResult', 'DispatchState',
    # notifications
    'LoggingNotifier', 'CollectingNotifier',
    # palette
    'Palette', 'build_palette',
]
