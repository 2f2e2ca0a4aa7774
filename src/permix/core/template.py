"""Deferred rule definitions applied later through setup."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from permix.core.models import Rules

T = TypeVar("T")


class Template(Generic[T]):
    """A rule set, or a factory of one, resolved when called.

    Example::

        admin = permix.template({"post": {"create": True, "delete": True}})
        author = permix.template(lambda user: {"post": {"edit": lambda p: p["author"] == user}})

        permix.setup(admin())
        permix.setup(author("1"))
    """

    def __init__(self, value: Rules | Callable[[T], Rules]) -> None:
        self._value = value

    @property
    def is_factory(self) -> bool:
        return callable(self._value)

    def __call__(self, context: T | None = None) -> Rules:
        if callable(self._value):
            return self._value(context)  # type: ignore[arg-type]
        return self._value

    def __repr__(self) -> str:
        kind = "factory" if self.is_factory else "rules"
        return f"Template({kind})"


def create_template(value: Rules | Callable[[Any], Rules]) -> Template[Any]:
    return Template(value)
