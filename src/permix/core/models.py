"""Pydantic models and type aliases for permission definitions and rules."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from permix.core.errors import ValidationError

ALL_ACTIONS = "all"

Predicate: TypeAlias = Callable[[Any], Any]
RuleValue: TypeAlias = bool | Predicate
Rules: TypeAlias = dict[str, dict[str, RuleValue]]
StateJSON: TypeAlias = dict[str, dict[str, bool]]
ActionSelector: TypeAlias = str | Literal["all"] | list[str] | tuple[str, ...]


class EntityDefinition(BaseModel):
    """Declared actions of one entity, plus the shape of its check data."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    actions: frozenset[str] = Field(default_factory=frozenset)
    data_type: Any = None
    data_required: bool = False

    def has_action(self, action: str) -> bool:
        return action in self.actions


Definition: TypeAlias = dict[str, EntityDefinition]


def parse_definition(raw: Mapping[str, Any] | None) -> Definition | None:
    """Build the runtime projection of a definition schema.

    Each entity may be given as an ``EntityDefinition``, a list of action
    names, or a mapping with ``action``/``actions``, ``data_type`` and
    ``data_required`` keys. Raises ValidationError on anything else.
    """
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ValidationError("Definition must be a mapping of entity names")

    definition: Definition = {}
    for entity, entry in raw.items():
        if not isinstance(entity, str):
            raise ValidationError(f"Definition entity name must be a string, got {entity!r}")
        definition[entity] = _parse_entity(entity, entry)
    return definition


def _parse_entity(entity: str, entry: Any) -> EntityDefinition:
    if isinstance(entry, EntityDefinition):
        return entry
    if isinstance(entry, (list, tuple, set, frozenset)):
        entry = {"actions": entry}
    if not isinstance(entry, Mapping):
        raise ValidationError(f"Definition for entity '{entity}' must be a mapping or a list")

    data = dict(entry)
    if "action" in data and "actions" not in data:
        data["actions"] = data.pop("action")
    if isinstance(data.get("actions"), str):
        data["actions"] = [data["actions"]]

    try:
        return EntityDefinition.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Definition for entity '{entity}' is not valid: {e}") from e
