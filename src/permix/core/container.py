"""Permix: the permission state container and its module-level helpers."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from permix.core.check import check_with_rules
from permix.core.config import PermixConfig
from permix.core.errors import InvalidInstanceError, UninitializedError, ValidationError
from permix.core.hooks import Handler, HookEmitter, Unsubscribe
from permix.core.models import ActionSelector, Definition, Rules, StateJSON, parse_definition
from permix.core.serialization import get_serializable_state, parse_serializable_state
from permix.core.template import Template, create_template
from permix.core.validation import describe_rules_errors

logger = logging.getLogger(__name__)

SETUP_EVENT = "setup"
READY_EVENT = "ready"
HYDRATE_EVENT = "hydrate"

# Identity-checked marker carried by every genuine container.
_PERMIX_TOKEN = object()


class PermixInternals:
    """Accessors used by serialization and framework adapters, not by hosts."""

    def __init__(self, owner: Permix) -> None:
        self._owner = owner
        self._token = _PERMIX_TOKEN

    @property
    def hooks(self) -> HookEmitter:
        return self._owner._hooks

    @property
    def definition(self) -> Definition | None:
        return self._owner._definition

    def is_setup_called(self) -> bool:
        return self._owner._is_setup_called

    def get_rules(self) -> Rules:
        rules = self._owner._rules
        if rules is None:
            raise UninitializedError("Rules were not provided. Call setup first.")
        return rules

    def set_rules(self, rules: Rules) -> None:
        """Replace rules without validation or events."""
        with self._owner._lock:
            self._owner._rules = rules

    def get_serializable_state(self) -> StateJSON:
        return get_serializable_state(self._owner._rules)

    def parse_serializable_state(self, state: Any) -> Rules:
        return parse_serializable_state(
            state,
            self._owner._definition,
            strict=self._owner.config.strict_snapshots,
        )


class Permix:
    """Holds the current rule set and answers permission checks.

    Example::

        permix = create_permix({"post": ["create", "edit"]})
        permix.setup({"post": {"create": True, "edit": lambda post: post["author"] == "1"}})

        permix.check("post", "create")                   # True
        permix.check("post", "edit", {"author": "2"})    # False
        permix.check("post", "all", {"author": "1"})     # True
    """

    def __init__(
        self,
        definition: Definition | None = None,
        *,
        config: PermixConfig | None = None,
    ) -> None:
        self.config = config or PermixConfig.from_env()
        self._definition = definition
        self._rules: Rules | None = None
        self._is_setup_called = False
        self._is_ready = False
        self._lock = threading.Lock()
        self._ready_event = asyncio.Event()
        self._hooks = HookEmitter()
        self.internals = PermixInternals(self)

    def setup(self, rules: Rules) -> None:
        errors = describe_rules_errors(rules)
        if errors:
            raise ValidationError("Permissions in setup are not valid: " + "; ".join(errors), errors)

        with self._lock:
            self._rules = rules
            self._is_setup_called = True
            first = not self._is_ready
            self._is_ready = True

        # The gate opens with the flag, before any handler can raise.
        self._ready_event.set()
        if first:
            logger.debug("Permissions are ready")
            self._hooks.call_hook(READY_EVENT)
        self._hooks.call_hook(SETUP_EVENT, rules)

    def check(self, entity: str, action: ActionSelector, data: Any = None) -> bool:
        return check_with_rules(
            self._rules,
            entity,
            action,
            data,
            definition=self._definition,
            level=self.config.diagnostic_levelno,
        )

    async def check_async(self, entity: str, action: ActionSelector, data: Any = None) -> bool:
        """Like ``check``, but waits for the first setup before evaluating."""
        await self._ready_event.wait()
        return self.check(entity, action, data)

    def hook(self, name: str, handler: Handler) -> Unsubscribe:
        return self._hooks.hook(name, handler)

    def hook_once(self, name: str, handler: Handler) -> Unsubscribe:
        return self._hooks.hook_once(name, handler)

    def template(self, value: Rules | Callable[[Any], Rules]) -> Template[Any]:
        return create_template(value)

    def is_ready(self) -> bool:
        return self._is_ready

    async def is_ready_async(self) -> bool:
        await self._ready_event.wait()
        return self._is_ready

    def __repr__(self) -> str:
        entities = sorted(self._rules) if self._rules is not None else None
        return f"Permix(ready={self._is_ready}, entities={entities})"


def create_permix(
    definition: Mapping[str, Any] | None = None,
    initial: Rules | None = None,
    *,
    config: PermixConfig | None = None,
) -> Permix:
    """Create a container, optionally set up with ``initial`` right away."""
    permix = Permix(parse_definition(definition), config=config)
    if initial is not None:
        permix.setup(initial)
    return permix


def validate_permix(permix: Any) -> Permix:
    internals = getattr(permix, "internals", None)
    if (
        getattr(internals, "_token", None) is not _PERMIX_TOKEN
        or getattr(internals, "_owner", None) is not permix
    ):
        raise InvalidInstanceError("Permix instance is not valid")
    return permix  # type: ignore[no-any-return]


def get_rules(permix: Permix) -> Rules:
    return validate_permix(permix).internals.get_rules()


def dehydrate(permix: Permix) -> StateJSON:
    """Snapshot the container's rules as JSON-safe booleans."""
    return validate_permix(permix).internals.get_serializable_state()


def hydrate(permix: Permix, state: Any) -> None:
    """Load a snapshot without running setup side effects.

    Fires only the ``hydrate`` event; readiness and the setup flag are left
    as they were.
    """
    internals = validate_permix(permix).internals
    internals.set_rules(internals.parse_serializable_state(state))
    internals.hooks.call_hook(HYDRATE_EVENT)
