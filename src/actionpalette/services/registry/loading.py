from __future__ import annotations

from collections.abc import Mapping
import importlib
import importlib.util
import logging
from pathlib import Path
from typing import Any

from actionpalette.contracts.errors import ConfigurationError

logger = logging.getLogger("actionpalette.registry.loading")

DEFAULT_ATTR = "ACTIONS"


def _split_ref(ref: str) -> tuple[str, str]:
    # "C:\\x\\y.py:ACTIONS" has a drive colon too, so split on the last one
    target, sep, attr = ref.rpartition(":")
    if not sep or not target or "/" in attr or "\\" in attr or attr.endswith(".py"):
        return ref, DEFAULT_ATTR
    return target, attr or DEFAULT_ATTR


def _load_module_from_path(path: Path) -> Any:
    spec = importlib.util.spec_from_file_location(f"actionpalette_user_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Could not create import spec for {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_user_actions(ref: str) -> Mapping[str, Any] | list[Any]:
    """
    Import user action declarations.

    `ref` is "package.module[:ATTR]" or "path/to/file.py[:ATTR]"; ATTR defaults
    to ACTIONS and must be a mapping of name -> declaration, or a list of
    declarations carrying a "name".

    Raises:
        ConfigurationError: the module cannot be imported or ATTR is missing or
            of the wrong type.
    """
    target, attr = _split_ref(ref)

    try:
        if target.endswith(".py") or "/" in target or "\\" in target:
            path = Path(target).expanduser()
            if not path.exists():
                raise ConfigurationError(f"User actions file not found: {path}")
            module = _load_module_from_path(path)
        else:
            module = importlib.import_module(target)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to import user actions from '{target}': {e}") from e

    declarations = getattr(module, attr, None)
    if declarations is None:
        raise ConfigurationError(f"'{target}' defines no '{attr}'")
    if not isinstance(declarations, (Mapping, list, tuple)):
        raise ConfigurationError(
            f"'{target}:{attr}' must be a mapping or a list, got {type(declarations).__name__}"
        )

    logger.info("Loaded %d user action declaration(s) from %s", len(declarations), ref)
    return declarations if isinstance(declarations, Mapping) else list(declarations)
