from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
import logging
import threading
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from actionpalette.contracts.errors import RegistrationError, UnknownActionError
from actionpalette.contracts.services.host import Notifier
from actionpalette.core.actions.action_spec import Action
from actionpalette.core.actions.conditions import evaluate
from actionpalette.core.context.snapshot import Context

from .merge import merge_declarations
from .schema import ActionDecl

logger = logging.getLogger("actionpalette.registry")

Declarations = Mapping[str, Mapping[str, Any]] | Iterable[Mapping[str, Any]]


@dataclass(frozen=True)
class RegistrationIssue:
    name: str  # action key
    message: str  # human-readable reason
    details: list[dict[str, Any]] = field(default_factory=list)  # pydantic error entries


@dataclass(frozen=True)
class RegistrySnapshot:
    """
    One fully built registry generation. Never mutated; a rebuild publishes a
    new instance.
    """

    actions: tuple[Action, ...] = ()
    declarations: Mapping[str, Mapping[str, Any]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    issues: tuple[RegistrationIssue, ...] = ()

    def index(self) -> dict[str, Action]:
        return {a.name: a for a in self.actions}


def _iter_declarations(source: Declarations | None) -> Iterator[tuple[str | None, Any]]:
    """
    Accept either {name: decl} or [decl-with-name, ...]. List entries without a
    name are yielded with name=None so the caller can report them.
    """
    if source is None:
        return
    if isinstance(source, Mapping):
        for name, decl in source.items():
            yield str(name), decl
        return
    for decl in source:
        name = decl.get("name") if isinstance(decl, Mapping) else None
        yield (str(name) if name else None), decl


def validate_declaration(name: str, decl: Mapping[str, Any]) -> Action:
    """
    Validate one merged declaration and build its Action.

    Raises:
        RegistrationError: the declaration is malformed.
    """
    if not isinstance(decl, Mapping):
        raise RegistrationError(name, f"expected a mapping, got {type(decl).__name__}")
    try:
        parsed = ActionDecl.model_validate({**decl, "name": name})
    except ValidationError as e:
        details = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]} for err in e.errors()
        ]
        summary = "; ".join(f"{d['loc']}: {d['msg']}" for d in details)
        raise RegistrationError(name, summary, details=details) from e
    return parsed.to_action()


def build_snapshot(
    defaults: Declarations | None,
    overrides: Declarations | None = None,
) -> RegistrySnapshot:
    """
    Merge overrides onto defaults key by key, then validate every entry.

    Declaration order is kept: defaults first, then keys only the overrides
    define. A key present in both keeps its default position.
    """
    merged: dict[str, dict[str, Any]] = {}
    issues: list[RegistrationIssue] = []

    for source in (defaults, overrides):
        for pos, (name, decl) in enumerate(_iter_declarations(source)):
            if name is None:
                issues.append(
                    RegistrationIssue(name=f"#{pos}", message="declaration is missing a 'name'")
                )
                continue
            if not isinstance(decl, Mapping):
                issues.append(
                    RegistrationIssue(
                        name=name, message=f"expected a mapping, got {type(decl).__name__}"
                    )
                )
                continue
            if name in merged:
                merged[name] = merge_declarations(merged[name], decl)
            else:
                merged[name] = dict(decl)

    actions: list[Action] = []
    for name, decl in merged.items():
        try:
            actions.append(validate_declaration(name, decl))
        except RegistrationError as e:
            issues.append(RegistrationIssue(name=name, message=str(e), details=e.details))

    return RegistrySnapshot(
        actions=tuple(actions),
        declarations=MappingProxyType(merged),
        issues=tuple(issues),
    )


class ActionRegistry:
    """
    Process-wide set of named actions.

    Readers always go through the currently published RegistrySnapshot, which
    is swapped in one assignment under the lock; a reader never sees a
    half-merged registry.
    """

    def __init__(self, snapshot: RegistrySnapshot | None = None, *, notifier: Notifier | None = None):
        self._lock = threading.RLock()
        self._snapshot = snapshot or RegistrySnapshot()
        self._notifier = notifier

    # --- building -----------------------------------------------------------

    def _publish(self, snapshot: RegistrySnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
        self._report(snapshot.issues)

    def _report(self, issues: tuple[RegistrationIssue, ...]) -> None:
        if not issues:
            return
        for issue in issues:
            logger.warning("Skipping action '%s': %s", issue.name, issue.message)
        if self._notifier is not None:
            names = ", ".join(i.name for i in issues)
            self._notifier.notify(
                f"{len(issues)} action(s) failed validation and were skipped: {names}",
                "warn",
            )

    def reload(self, defaults: Declarations | None, overrides: Declarations | None = None) -> None:
        self._publish(build_snapshot(defaults, overrides))
        logger.info("Action registry built with %d action(s)", len(self))

    def register(self, name: str, declaration: Mapping[str, Any]) -> Action:
        """
        Merge one declaration into the live registry.

        Raises:
            RegistrationError: the merged declaration is invalid; the registry
                is left unchanged.
        """
        with self._lock:
            current = self._snapshot
            previous = current.declarations.get(name)
            merged = (
                merge_declarations(previous, declaration) if previous is not None else dict(declaration)
            )
            action = validate_declaration(name, merged)

            declarations = dict(current.declarations)
            declarations[name] = merged
            if any(a.name == name for a in current.actions):
                actions = tuple(action if a.name == name else a for a in current.actions)
            else:
                actions = self._insert_in_declaration_order(current, declarations, action)

            self._snapshot = RegistrySnapshot(
                actions=actions,
                declarations=MappingProxyType(declarations),
                issues=tuple(i for i in current.issues if i.name != name),
            )
        return action

    @staticmethod
    def _insert_in_declaration_order(
        current: RegistrySnapshot,
        declarations: Mapping[str, Mapping[str, Any]],
        action: Action,
    ) -> tuple[Action, ...]:
        # a previously invalid entry regains its original slot
        index = current.index()
        index[action.name] = action
        return tuple(index[n] for n in declarations if n in index)

    # --- reading ------------------------------------------------------------

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    @property
    def issues(self) -> tuple[RegistrationIssue, ...]:
        return self._snapshot.issues

    def __len__(self) -> int:
        return len(self._snapshot.actions)

    def __iter__(self) -> Iterator[Action]:
        return iter(self._snapshot.actions)

    def __contains__(self, name: object) -> bool:
        return any(a.name == name for a in self._snapshot.actions)

    def names(self) -> list[str]:
        return [a.name for a in self._snapshot.actions]

    def get(self, name: str) -> Action | None:
        for a in self._snapshot.actions:
            if a.name == name:
                return a
        return None

    def require(self, name: str) -> Action:
        action = self.get(name)
        if action is None:
            raise UnknownActionError(f"No action named '{name}'")
        return action

    def find_by_slash_cmd(self, cmd: str) -> Action | None:
        cmd = cmd.lstrip("/")
        for a in self._snapshot.actions:
            if a.opts.slash_cmd is not None and a.opts.slash_cmd.lstrip("/") == cmd:
                return a
        return None

    def find_by_mapping(self, keys: str) -> Action | None:
        for a in self._snapshot.actions:
            if a.opts.mapping == keys:
                return a
        return None

    def is_visible(self, action: Action, context: Context) -> bool:
        if not action.allows_mode(context.mode):
            return False
        return evaluate(action.opts.condition, context)

    def visible(self, context: Context) -> list[Action]:
        """Actions that may be shown for `context`, in declaration order."""
        snapshot = self._snapshot
        return [a for a in snapshot.actions if self.is_visible(a, context)]


def build(
    defaults: Declarations | None,
    overrides: Declarations | None = None,
    *,
    notifier: Notifier | None = None,
) -> ActionRegistry:
    registry = ActionRegistry(notifier=notifier)
    registry.reload(defaults, overrides)
    return registry


def visible(registry: ActionRegistry, context: Context) -> list[Action]:
    return registry.visible(context)
