"""Tests for core/container.py — lifecycle, setup, events, and instance checks."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from permix import (
    InvalidInstanceError,
    Permix,
    PermixConfig,
    UninitializedError,
    ValidationError,
    create_permix,
    dehydrate,
    get_rules,
    hydrate,
    validate_permix,
)


class TestBeforeSetup:
    @pytest.mark.parametrize("action", ["create", "all", ["create", "read"]])
    def test_check_returns_false(self, permix: Permix, action):
        assert permix.check("post", action) is False

    def test_not_ready(self, permix: Permix):
        assert permix.is_ready() is False
        assert permix.internals.is_setup_called() is False

    def test_get_rules_raises(self, permix: Permix):
        with pytest.raises(UninitializedError):
            get_rules(permix)

    def test_serializable_state_is_empty(self, permix: Permix):
        assert permix.internals.get_serializable_state() == {}


class TestSetup:
    def test_setup_stores_rules(self, permix: Permix):
        rules = {"post": {"create": True}}
        permix.setup(rules)

        assert get_rules(permix) is rules
        assert permix.check("post", "create") is True

    def test_setup_marks_ready(self, permix: Permix):
        permix.setup({"post": {"create": True}})

        assert permix.is_ready() is True
        assert permix.internals.is_setup_called() is True

    def test_setup_replaces_whole_rule_set(self, permix: Permix):
        permix.setup({"post": {"create": True}, "comment": {"read": True}})
        permix.setup({"post": {"read": True}})

        assert permix.check("post", "create") is False
        assert permix.check("post", "read") is True
        assert permix.check("comment", "read") is False

    def test_initial_rules_go_through_setup(self):
        permix = create_permix(initial={"post": {"create": True}})

        assert permix.is_ready() is True
        assert permix.check("post", "create") is True

    def test_invalid_initial_rules_raise(self):
        with pytest.raises(ValidationError):
            create_permix(initial={"post": {"create": "yes"}})

    def test_predicate_rules(self, permix: Permix):
        permix.setup({"post": {"edit": lambda data: data["authorId"] == "1"}})

        assert permix.check("post", "edit", {"authorId": "1"}) is True
        assert permix.check("post", "edit", {"authorId": "2"}) is False


class TestSetupValidation:
    @pytest.mark.parametrize(
        "bad",
        [None, "rules", 1, {"post": True}, {"post": {"create": "yes"}}, {"post": {"create": None}}],
    )
    def test_invalid_rules_raise(self, permix: Permix, bad):
        with pytest.raises(ValidationError):
            permix.setup(bad)

    def test_invalid_rules_leave_state_unchanged(self, permix: Permix):
        rules = {"post": {"create": True}}
        permix.setup(rules)

        with pytest.raises(ValidationError):
            permix.setup({"post": {"create": 1}})

        assert get_rules(permix) is rules
        assert permix.check("post", "create") is True

    def test_invalid_first_setup_does_not_mark_ready(self, permix: Permix):
        with pytest.raises(ValidationError):
            permix.setup({"post": {"create": 1}})

        assert permix.is_ready() is False
        assert permix.internals.is_setup_called() is False

    def test_error_lists_reasons(self, permix: Permix):
        with pytest.raises(ValidationError) as exc_info:
            permix.setup({"post": {"create": 1, "read": "x"}})
        assert len(exc_info.value.reasons) == 2
        assert "post.create" in str(exc_info.value)


class TestEvents:
    def test_setup_event_receives_rules(self, permix: Permix):
        received: list[dict] = []
        permix.hook("setup", received.append)
        rules = {"post": {"create": True}}

        permix.setup(rules)

        assert received == [rules]

    def test_ready_fires_only_on_first_setup(self, permix: Permix):
        calls: list[str] = []
        permix.hook("ready", lambda: calls.append("ready"))

        permix.setup({"post": {"create": True}})
        permix.setup({"post": {"create": False}})

        assert calls == ["ready"]

    def test_ready_precedes_setup_handlers(self, permix: Permix):
        calls: list[str] = []
        permix.hook("setup", lambda _rules: calls.append("setup"))
        permix.hook("ready", lambda: calls.append("ready"))

        permix.setup({"post": {"create": True}})

        assert calls == ["ready", "setup"]

    def test_hook_once_fires_once(self, permix: Permix):
        calls: list[int] = []
        permix.hook_once("setup", lambda _rules: calls.append(1))

        permix.setup({"post": {"create": True}})
        permix.setup({"post": {"create": True}})

        assert calls == [1]

    def test_unsubscribe(self, permix: Permix):
        calls: list[int] = []
        unsubscribe = permix.hook("setup", lambda _rules: calls.append(1))
        unsubscribe()

        permix.setup({"post": {"create": True}})

        assert calls == []

    def test_setup_handler_sees_new_rules(self, permix: Permix):
        seen: list[bool] = []
        permix.hook("setup", lambda _rules: seen.append(permix.check("post", "create")))

        permix.setup({"post": {"create": True}})

        assert seen == [True]

    def test_invalid_setup_fires_nothing(self, permix: Permix):
        calls: list[str] = []
        permix.hook("setup", lambda _rules: calls.append("setup"))
        permix.hook("ready", lambda: calls.append("ready"))

        with pytest.raises(ValidationError):
            permix.setup({"post": []})

        assert calls == []


class TestInternals:
    def test_set_rules_fires_no_events(self, permix: Permix):
        calls: list[str] = []
        permix.hook("setup", lambda _rules: calls.append("setup"))
        permix.hook("ready", lambda: calls.append("ready"))

        permix.internals.set_rules({"post": {"create": True}})

        assert calls == []
        assert permix.check("post", "create") is True
        assert permix.is_ready() is False
        assert permix.internals.is_setup_called() is False

    def test_set_rules_skips_validation(self, permix: Permix):
        permix.internals.set_rules({"post": {"create": True, "read": 1}})  # type: ignore[dict-item]
        assert get_rules(permix)["post"]["read"] == 1

    def test_hooks_exposes_emitter(self, permix: Permix):
        calls: list[int] = []
        permix.hook("custom", lambda: calls.append(1))

        permix.internals.hooks.call_hook("custom")

        assert calls == [1]


class TestValidatePermix:
    def test_genuine_container_passes(self, permix: Permix):
        assert validate_permix(permix) is permix

    def test_lookalike_fails(self):
        fake = SimpleNamespace(
            check=lambda *a: True,
            setup=lambda rules: None,
            hook=lambda *a: None,
            internals=SimpleNamespace(_token=object(), get_rules=lambda: {}),
        )
        with pytest.raises(InvalidInstanceError):
            validate_permix(fake)

    @pytest.mark.parametrize("value", [None, 1, "permix", {}, object()])
    def test_unrelated_values_fail(self, value):
        with pytest.raises(InvalidInstanceError):
            validate_permix(value)

    def test_borrowed_internals_fail(self, permix: Permix):
        fake = SimpleNamespace(check=lambda *a: True, internals=permix.internals)
        with pytest.raises(InvalidInstanceError):
            validate_permix(fake)

    def test_get_rules_validates(self):
        with pytest.raises(InvalidInstanceError):
            get_rules(SimpleNamespace())  # type: ignore[arg-type]


class TestHydrate:
    def test_dehydrate_collapses_predicates(self, ready_permix: Permix):
        assert dehydrate(ready_permix) == {
            "post": {"create": True, "read": True, "edit": False, "delete": False},
            "comment": {"create": True, "read": True},
        }

    def test_hydrate_loads_snapshot(self, definition):
        source = create_permix(definition, {"post": {"create": True, "read": False}})
        target = create_permix(definition)

        hydrate(target, dehydrate(source))

        assert target.check("post", "create") is True
        assert target.check("post", "read") is False

    def test_hydrate_fires_only_hydrate_event(self, permix: Permix):
        calls: list[str] = []
        for event in ("setup", "ready", "hydrate"):
            permix.hook(event, lambda *_args, e=event: calls.append(e))

        hydrate(permix, {"post": {"create": True}})

        assert calls == ["hydrate"]
        assert permix.is_ready() is False

    def test_hydrate_rejects_malformed_snapshot(self, permix: Permix):
        with pytest.raises(ValidationError):
            hydrate(permix, {"post": {"create": "yes"}})
        with pytest.raises(UninitializedError):
            get_rules(permix)

    def test_hydrate_rejects_unknown_names(self, definition):
        permix = create_permix(definition)
        with pytest.raises(ValidationError):
            hydrate(permix, {"user": {"create": True}})

    def test_hydrate_lenient_when_not_strict(self, definition):
        permix = create_permix(definition, config=PermixConfig(strict_snapshots=False))
        hydrate(permix, {"user": {"create": True}})
        assert get_rules(permix) == {"user": {"create": True}}
        assert permix.check("user", "create") is False


class TestDefinitionChecks:
    def test_undeclared_action_denied(self, caplog: pytest.LogCaptureFixture):
        permix = create_permix({"post": ["create"]})
        permix.setup({"post": {"create": True, "delete": True}})

        with caplog.at_level(logging.ERROR, logger="permix"):
            assert permix.check("post", "delete") is False
            assert permix.check("post", "all") is False
        assert permix.check("post", "create") is True
        assert "'delete'" in caplog.text

    def test_undeclared_entity_denied(self, caplog: pytest.LogCaptureFixture):
        permix = create_permix({"post": ["create"]})
        permix.setup({"post": {"create": True}, "secret": {"read": True}})

        with caplog.at_level(logging.ERROR, logger="permix"):
            assert permix.check("secret", "read") is False
        assert "'secret'" in caplog.text


class TestHookFailures:
    def test_ready_handler_error_still_marks_ready(self, permix: Permix):
        def boom() -> None:
            raise RuntimeError("boom")

        permix.hook_once("ready", boom)
        with pytest.raises(RuntimeError):
            permix.setup({"post": {"create": True}})

        assert permix.is_ready() is True
        assert permix.internals.is_setup_called() is True
        assert permix.check("post", "create") is True

    def test_setup_handler_error_keeps_new_rules(self, permix: Permix):
        def boom(_rules) -> None:
            raise RuntimeError("boom")

        permix.hook("setup", boom)
        with pytest.raises(RuntimeError):
            permix.setup({"post": {"create": True}})

        assert permix.is_ready() is True
        assert permix.check("post", "create") is True


class TestDiagnostics:
    def test_default_config_reads_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PERMIX_DIAGNOSTIC_LEVEL", "warning")
        monkeypatch.setenv("PERMIX_STRICT_SNAPSHOTS", "false")

        permix = create_permix()

        assert permix.config.diagnostic_level == "WARNING"
        assert permix.config.strict_snapshots is False

    def test_config_level_used_for_check_diagnostics(self, caplog: pytest.LogCaptureFixture):
        permix = create_permix(config=PermixConfig(diagnostic_level="WARNING"))
        with caplog.at_level(logging.DEBUG, logger="permix"):
            permix.check("post", "create")
        assert caplog.records[-1].levelno == logging.WARNING

    def test_repr(self, permix: Permix):
        assert repr(permix) == "Permix(ready=False, entities=None)"
        permix.setup({"post": {"create": True}, "comment": {}})
        assert repr(permix) == "Permix(ready=True, entities=['comment', 'post'])"
