"""Shared fixtures for permix tests."""

from __future__ import annotations

import pytest

from permix import Permix, create_permix

POST_DEFINITION = {
    "post": {"actions": ["create", "read", "edit", "delete"], "data_required": True},
    "comment": ["create", "read"],
}


@pytest.fixture
def definition() -> dict:
    return POST_DEFINITION


@pytest.fixture
def permix() -> Permix:
    """An empty container with no definition."""
    return create_permix()


@pytest.fixture
def post_rules() -> dict:
    return {
        "post": {
            "create": True,
            "read": True,
            "edit": lambda post: post is not None and post["authorId"] == "1",
            "delete": False,
        },
        "comment": {"create": True, "read": True},
    }


@pytest.fixture
def ready_permix(post_rules: dict) -> Permix:
    return create_permix(POST_DEFINITION, post_rules)
