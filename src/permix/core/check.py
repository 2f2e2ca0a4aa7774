"""Evaluate an entity/action query against a rule set."""

from __future__ import annotations

import logging
from typing import Any

from permix.core.models import ALL_ACTIONS, ActionSelector, Definition, Rules

logger = logging.getLogger(__name__)


def check_with_rules(
    rules: Rules | None,
    entity: str,
    action: ActionSelector,
    data: Any = None,
    *,
    definition: Definition | None = None,
    level: int = logging.ERROR,
) -> bool:
    """Return True only if every selected action allows ``data``.

    Never raises for lookups: a missing rule set, an unknown entity or an
    unknown action is logged at ``level`` and denied.
    """
    if rules is None:
        logger.log(level, "Rules were not provided. Call setup before checking permissions.")
        return False

    entity_def = definition.get(entity) if definition is not None else None
    if definition is not None and entity_def is None:
        logger.log(level, f"Entity {entity!r} is not declared in the definition.")
        return False

    entity_rules = rules.get(entity)
    if entity_rules is None:
        logger.log(level, f"Incorrect entity name {entity!r}. Check the name of the entity.")
        return False

    if isinstance(action, str) and action == ALL_ACTIONS:
        names = list(entity_rules)
    else:
        names = [action] if isinstance(action, str) else list(action)

    # Every name is checked so each unknown one gets its own diagnostic.
    known = True
    for name in names:
        if entity_def is not None and not entity_def.has_action(name):
            logger.log(level, f"Incorrect action name {name!r} for entity {entity!r}.")
            known = False
        elif name not in entity_rules:
            logger.log(level, f"No rule for action {name!r} of entity {entity!r}.")
            known = False
    if not known:
        return False

    return all(_evaluate(entity_rules[name], data) for name in names)


def _evaluate(value: Any, data: Any) -> bool:
    if callable(value):
        return bool(value(data))
    return bool(value)
