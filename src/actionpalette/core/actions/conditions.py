from __future__ import annotations

import logging

from actionpalette.core.context.snapshot import Context

from .action_spec import ConditionFn, Dynamic, Predicate, Static, as_predicate

logger = logging.getLogger("actionpalette.conditions")


def evaluate(predicate: bool | ConditionFn | Predicate | None, context: Context) -> bool:
    """
    Run a visibility predicate against a context snapshot.

    Used for both action-level and prompt-level conditions:
      - None / True   -> included
      - False         -> excluded
      - callable      -> called with `context`, result coerced with bool()

    A predicate that raises counts as False. The error is only logged at DEBUG
    so that one broken user predicate cannot take the palette down.
    """
    try:
        pred = as_predicate(predicate)
    except TypeError:
        logger.debug("Ignoring malformed predicate %r", predicate, exc_info=True)
        return False

    if pred is None:
        return True
    if isinstance(pred, Static):
        return pred.value
    if isinstance(pred, Dynamic):
        try:
            return bool(pred.fn(context))
        except Exception:
            logger.debug("Condition %r raised; treating as False", pred.fn, exc_info=True)
            return False
    return False
