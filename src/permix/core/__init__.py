"""Core permission engine: container, checks, hooks, templates and snapshots."""

from permix.core.check import check_with_rules
from permix.core.config import PermixConfig, load_permix_config
from permix.core.container import (
    HYDRATE_EVENT,
    READY_EVENT,
    SETUP_EVENT,
    Permix,
    PermixInternals,
    create_permix,
    dehydrate,
    get_rules,
    hydrate,
    validate_permix,
)
from permix.core.errors import (
    InvalidInstanceError,
    PermixError,
    UninitializedError,
    ValidationError,
)
from permix.core.hooks import HookEmitter
from permix.core.models import (
    ALL_ACTIONS,
    Definition,
    EntityDefinition,
    Rules,
    StateJSON,
    parse_definition,
)
from permix.core.serialization import (
    dumps_state,
    get_serializable_state,
    loads_state,
    parse_serializable_state,
)
from permix.core.template import Template, create_template
from permix.core.validation import describe_rules_errors, is_rules_valid

__all__ = [
    "ALL_ACTIONS",
    "Definition",
    "EntityDefinition",
    "HYDRATE_EVENT",
    "HookEmitter",
    "InvalidInstanceError",
    "Permix",
    "PermixConfig",
    "PermixError",
    "PermixInternals",
    "READY_EVENT",
    "Rules",
    "SETUP_EVENT",
    "StateJSON",
    "Template",
    "UninitializedError",
    "ValidationError",
    "check_with_rules",
    "create_permix",
    "create_template",
    "dehydrate",
    "describe_rules_errors",
    "dumps_state",
    "get_rules",
    "get_serializable_state",
    "hydrate",
    "is_rules_valid",
    "load_permix_config",
    "loads_state",
    "parse_definition",
    "parse_serializable_state",
    "validate_permix",
]
