"""permix: typed runtime permission state container."""

from importlib.metadata import PackageNotFoundError, version

from permix.core import (
    InvalidInstanceError,
    Permix,
    PermixConfig,
    PermixError,
    Template,
    UninitializedError,
    ValidationError,
    create_permix,
    dehydrate,
    get_rules,
    hydrate,
    validate_permix,
)

try:
    __version__ = version("permix")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "InvalidInstanceError",
    "Permix",
    "PermixConfig",
    "PermixError",
    "Template",
    "UninitializedError",
    "ValidationError",
    "__version__",
    "create_permix",
    "dehydrate",
    "get_rules",
    "hydrate",
    "validate_permix",
]
