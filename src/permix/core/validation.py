"""Structural validation of candidate rule sets."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def describe_rules_errors(candidate: Any) -> list[str]:
    """Return every reason ``candidate`` cannot be used as a rule set.

    Only the shape is checked: entity and action names are not compared
    against a definition.
    """
    if not isinstance(candidate, Mapping):
        return [f"rules must be a mapping, got {type(candidate).__name__}"]

    errors: list[str] = []
    for entity, actions in candidate.items():
        if not isinstance(entity, str):
            errors.append(f"entity name {entity!r} is not a string")
            continue
        if not isinstance(actions, Mapping):
            errors.append(f"entity '{entity}' must map to a mapping, got {type(actions).__name__}")
            continue
        for action, value in actions.items():
            if not isinstance(action, str):
                errors.append(f"action name {action!r} of entity '{entity}' is not a string")
            elif not (isinstance(value, bool) or callable(value)):
                errors.append(
                    f"rule '{entity}.{action}' must be a bool or a callable, "
                    f"got {type(value).__name__}"
                )
    return errors


def is_rules_valid(candidate: Any) -> bool:
    return not describe_rules_errors(candidate)
