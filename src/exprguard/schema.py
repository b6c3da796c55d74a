"""
Schema definitions for exprguard.

This module defines the Pydantic model for the declarative policy tables and
the YAML loading helpers:
- PolicyConfig: blocked/allowed namespaces and allowed types/supertypes
- load_policy / load_policy_from_string: YAML -> validated PolicyConfig

Design Decisions:
    - The model is frozen and every table is a tuple, so a loaded policy can
      be shared between threads without copying
    - Namespace prefixes are normalised to end with "." so that "os" can
      never accidentally match "osx"
    - An allowed namespace that does not extend a blocked namespace is
      rejected: it could only ever widen access, never carve it out
    - Omitted tables fall back to the built-in defaults
"""

import logging
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from exprguard import defaults
from exprguard.errors import PolicyConfigError, PolicyNotFoundError

logger = logging.getLogger(__name__)

_TYPE_NAME_RE = re.compile(r"^[A-Za-z_][\w$]*(\.[A-Za-z_][\w$]*)+$")


def _normalize_namespaces(values: tuple[str, ...]) -> tuple[str, ...]:
    """Validate namespace prefixes and bring them to the ``pkg.sub.`` form."""
    normalized = set()
    for value in values:
        prefix = value.strip()
        if prefix.endswith("*"):
            prefix = prefix[:-1]
        if not prefix or prefix == ".":
            msg = f"Namespace prefix cannot be empty: {value!r}"
            raise ValueError(msg)
        if "*" in prefix or any(c.isspace() for c in prefix):
            msg = f"Invalid namespace prefix: {value!r}"
            raise ValueError(msg)
        if not prefix.endswith("."):
            prefix += "."
        normalized.add(prefix)
    return tuple(sorted(normalized))


def _validate_type_names(values: tuple[str, ...]) -> tuple[str, ...]:
    """Validate fully-qualified type names (no prefixes, no wildcards)."""
    names = set()
    for value in values:
        name = value.strip()
        if not _TYPE_NAME_RE.match(name):
            msg = f"Invalid type name (expected module.TypeName): {value!r}"
            raise ValueError(msg)
        names.add(name)
    return tuple(sorted(names))


# =============================================================================
# Policy Model
# =============================================================================


class PolicyConfig(BaseModel):
    """
    Declarative policy tables.

    Attributes:
        version: Schema version for forward compatibility
        blocked_namespaces: Namespaces whose types may neither be referenced
            nor have members accessed
        allowed_namespaces: Narrower namespaces inside a blocked namespace
            that are nonetheless safe
        blocked_type_reference_namespaces: Namespaces that may not be named
            in an expression even though their instances are not restricted
        allowed_types: Concrete types admitted by exact name inside blocked
            namespaces (any member may be accessed)
        allowed_supertypes: Interfaces whose directly declared members may
            be accessed on any instance assignable to them
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    version: str = Field(
        default="1.0",
        description="Policy schema version",
    )
    blocked_namespaces: tuple[str, ...] = Field(
        default=defaults.BLOCKED_NAMESPACES,
        description="Namespace prefixes blocked for all purposes",
    )
    allowed_namespaces: tuple[str, ...] = Field(
        default=defaults.ALLOWED_NAMESPACES,
        description="Namespace prefixes carved out of a blocked namespace",
    )
    blocked_type_reference_namespaces: tuple[str, ...] = Field(
        default=defaults.BLOCKED_TYPE_REFERENCE_NAMESPACES,
        description="Namespace prefixes blocked for type references only",
    )
    allowed_types: tuple[str, ...] = Field(
        default=defaults.ALLOWED_TYPES,
        description="Fully-qualified concrete types allowed inside blocked namespaces",
    )
    allowed_supertypes: tuple[str, ...] = Field(
        default=defaults.ALLOWED_SUPERTYPES,
        description="Fully-qualified interfaces whose declared members are allowed",
    )

    @field_validator(
        "blocked_namespaces",
        "allowed_namespaces",
        "blocked_type_reference_namespaces",
    )
    @classmethod
    def validate_namespaces(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Normalise namespace prefixes."""
        return _normalize_namespaces(v)

    @field_validator("allowed_types", "allowed_supertypes")
    @classmethod
    def validate_type_names(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate type names."""
        return _validate_type_names(v)

    @model_validator(mode="after")
    def validate_overrides(self) -> "PolicyConfig":
        """Every allowed namespace must strictly extend a blocked namespace."""
        for override in self.allowed_namespaces:
            if not any(
                override.startswith(blocked) and len(override) > len(blocked)
                for blocked in self.blocked_namespaces
            ):
                msg = (
                    f"Allowed namespace {override!r} does not extend any blocked "
                    "namespace and would have no effect"
                )
                raise ValueError(msg)
        return self


# =============================================================================
# YAML Loading Helpers
# =============================================================================


def load_policy(path: Path | str) -> PolicyConfig:
    """
    Load a policy from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated PolicyConfig object

    Raises:
        PolicyNotFoundError: If the file doesn't exist
        PolicyConfigError: If the YAML is malformed or doesn't match the schema
    """
    path = Path(path)
    if not path.is_file():
        raise PolicyNotFoundError(source=str(path))

    with path.open() as f:
        config = _parse_policy(f.read(), str(path))

    logger.info("Loaded policy %s (version %s)", path, config.version)
    return config


def load_policy_from_string(content: str) -> PolicyConfig:
    """Load a policy from a YAML string."""
    return _parse_policy(content, "<string>")


def _parse_policy(content: str, source: str) -> PolicyConfig:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PolicyConfigError(source=source, underlying_error=str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PolicyConfigError(
            source=source,
            underlying_error=f"expected a mapping at top level, got {type(data).__name__}",
        )

    try:
        return PolicyConfig.model_validate(data)
    except ValidationError as e:
        raise PolicyConfigError(source=source, underlying_error=str(e)) from e
