"""Synchronous, ordered publish/subscribe for container lifecycle events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
Unsubscribe = Callable[[], None]


@dataclass(eq=False)
class _Subscription:
    handler: Handler
    once: bool = False
    active: bool = field(default=True)


class HookEmitter:
    """Named events delivered in registration order.

    Events need no declaration. ``call_hook`` delivers to the subscribers
    registered when the call starts; once-handlers are detached before they
    run so re-entrant calls cannot fire them twice.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[_Subscription]] = {}

    def hook(self, name: str, handler: Handler) -> Unsubscribe:
        return self._register(name, _Subscription(handler=handler))

    def hook_once(self, name: str, handler: Handler) -> Unsubscribe:
        return self._register(name, _Subscription(handler=handler, once=True))

    def call_hook(self, name: str, *args: Any) -> None:
        subscribers = list(self._subscriptions.get(name, ()))
        if not subscribers:
            return

        logger.debug("Calling hook %r (%d subscribers)", name, len(subscribers))
        for sub in subscribers:
            if not sub.active:
                continue
            if sub.once:
                self._detach(name, sub)
            sub.handler(*args)

    def subscriber_count(self, name: str) -> int:
        return len(self._subscriptions.get(name, ()))

    def remove_all_hooks(self, name: str | None = None) -> None:
        names = [name] if name is not None else list(self._subscriptions)
        for event in names:
            for sub in self._subscriptions.pop(event, []):
                sub.active = False

    def _register(self, name: str, sub: _Subscription) -> Unsubscribe:
        self._subscriptions.setdefault(name, []).append(sub)
        logger.debug("Registered %s hook for %r", "once" if sub.once else "persistent", name)

        def unsubscribe() -> None:
            self._detach(name, sub)

        return unsubscribe

    def _detach(self, name: str, sub: _Subscription) -> None:
        if not sub.active:
            return
        sub.active = False
        subscribers = self._subscriptions.get(name)
        if subscribers is None:
            return
        subscribers.remove(sub)
        if not subscribers:
            del self._subscriptions[name]
