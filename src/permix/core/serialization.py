"""Convert live rule sets to plain boolean snapshots and back.

Predicates cannot be evaluated without data, so serialization denies them:
every callable becomes ``False``. Parsing only copies booleans, so a round
trip is lossy for predicate-bearing rules.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import StrictBool, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from permix.core.errors import ValidationError
from permix.core.models import Definition, Rules, StateJSON

_STATE_ADAPTER: TypeAdapter[dict[str, dict[str, StrictBool]]] = TypeAdapter(
    dict[str, dict[str, StrictBool]]
)


def get_serializable_state(rules: Rules | None) -> StateJSON:
    if not rules:
        return {}
    return {
        entity: {
            action: False if callable(value) else bool(value) for action, value in actions.items()
        }
        for entity, actions in rules.items()
    }


def parse_serializable_state(
    state: Any,
    definition: Definition | None = None,
    *,
    strict: bool = True,
) -> Rules:
    """Rebuild a rule set from an untyped snapshot.

    Raises ValidationError if the snapshot is not ``{entity: {action: bool}}``
    or, when ``definition`` is given and ``strict`` is set, names an entity or
    action the definition does not declare.
    """
    try:
        validated = _STATE_ADAPTER.validate_python(state)
    except PydanticValidationError as e:
        reasons = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ValidationError("Serialized permission state is not valid", reasons) from e

    if definition is not None and strict:
        reasons = _unknown_names(validated, definition)
        if reasons:
            raise ValidationError("Serialized permission state does not match definition", reasons)

    return {entity: dict(actions) for entity, actions in validated.items()}


def _unknown_names(state: StateJSON, definition: Definition) -> list[str]:
    reasons: list[str] = []
    for entity, actions in state.items():
        entity_def = definition.get(entity)
        if entity_def is None:
            reasons.append(f"unknown entity '{entity}'")
            continue
        for action in actions:
            if not entity_def.has_action(action):
                reasons.append(f"unknown action '{action}' for entity '{entity}'")
    return reasons


def dumps_state(state: StateJSON, *, indent: int | None = None) -> str:
    return json.dumps(state, indent=indent, sort_keys=True)


def loads_state(text: str, definition: Definition | None = None, *, strict: bool = True) -> Rules:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Serialized permission state is not valid JSON: {e}") from e
    return parse_serializable_state(data, definition, strict=strict)
