from __future__ import annotations

from typing import Any


class PaletteError(Exception):
    """Base class for every error raised by actionpalette."""


class RegistrationError(PaletteError):
    """
    A single action declaration failed validation.

    Raised per entry while building the registry; the builder records it and
    moves on to the next declaration.
    """

    def __init__(self, name: str, message: str, *, details: list[dict[str, Any]] | None = None):
        super().__init__(f"Action '{name}' is invalid: {message}")
        self.name = name
        self.details = details or []


class ConfigurationError(PaletteError):
    """Unknown strategy tag or missing required field at dispatch time."""


class ContentResolutionError(PaletteError):
    def __init__(self, action: str, index: int, role: str, cause: BaseException | None = None):
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Could not resolve content of prompt #{index} (role={role}) in '{action}'{reason}"
        )
        self.action = action
        self.index = index
        self.role = role
        self.__cause__ = cause


class HookError(PaletteError):
    """The action's pre_hook raised."""


class UnknownActionError(PaletteError, LookupError):
    """No action matches the requested name, slash command or mapping."""
