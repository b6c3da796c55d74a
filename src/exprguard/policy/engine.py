"""
Decision Engine for exprguard.

The Decision Engine is the security boundary between template expressions
and Python's object model. An expression evaluator must consult it before
resolving any type by name and before every attribute read, method call or
static member access it performs. Skipping a single check defeats the whole
policy.

Design Principles:
    - Deny-by-default inside blocked namespaces: access is granted only by an
      explicit allowed type, allowed supertype member, or a safe type shape
    - Verdicts are plain booleans: a denial carries no reason, so nothing
      about the policy tables leaks into template error messages
    - Malformed input is a caller bug: it raises InvalidArgumentError before
      any policy logic runs and is never reported as allow or deny
    - Pure: the same inputs always produce the same verdict, and the engine
      holds no mutable state, so it needs no locking

How it works:
    1. Type references are checked by name against the namespace tables
    2. Static access (the target is a class) is a type reference check, except
       that a class may always be asked for its own name
    3. A parameterized alias (``dict[str, int]``) forwards attribute reads
       and calls to its origin class, so access on it is static access on
       that class
    4. Instance access looks at type(target): unrestricted namespaces pass,
       then enum/annotation/proxy/allowed types pass, then only members that
       an allowed supertype of the type declares itself pass

Security Note:
    This module is security-critical. Changes should be reviewed carefully.
    The runtime type is always taken from type(target), never from
    target.__class__, which an object can override.
"""

from typing import Any

from exprguard.errors import InvalidArgumentError
from exprguard.policy import classify
from exprguard.policy.introspect import (
    TypeShape,
    alias_origin,
    is_annotation_type,
    is_enum_type,
    is_proxy_type,
    qualified_name,
)
from exprguard.policy.store import PolicyStore, default_store

# Members every object exposes that reveal nothing beyond the object itself.
UNIVERSAL_MEMBERS = frozenset({"__class__", "__str__", "__repr__"})

# Members a class may always be asked for, even in a blocked namespace.
TYPE_NAME_MEMBERS = frozenset({"__name__", "__qualname__"})

_WILDCARD = "*"


class PolicyEngine:
    """
    Access policy evaluator for template expressions.

    Usage:
        engine = PolicyEngine()
        if not engine.is_type_reference_allowed("subprocess.Popen"):
            raise EvaluationError(...)
        if engine.is_member_access_allowed(value, "items"):
            value.items()

    Attributes:
        store: The compiled policy tables
    """

    def __init__(self, store: PolicyStore | None = None) -> None:
        """
        Initialize the policy engine.

        Args:
            store: Compiled policy tables. Defaults to the shared store built
                from the built-in tables.
        """
        self.store = store if store is not None else default_store()

    # =========================================================================
    # Classification
    # =========================================================================

    def is_namespace_blocked_for_all_purposes(self, type_name: str) -> bool:
        """Check whether ``type_name`` is in a namespace blocked for all access."""
        _check_name("type_name", type_name)
        return classify.is_namespace_blocked_for_all_purposes(self.store, type_name)

    def is_namespace_blocked_for_type_reference(self, type_name: str) -> bool:
        """Check whether ``type_name`` is in a namespace that may not be referenced."""
        _check_name("type_name", type_name)
        return classify.is_namespace_blocked_for_type_reference(self.store, type_name)

    # =========================================================================
    # Decisions
    # =========================================================================

    def is_type_reference_allowed(self, type_name: str) -> bool:
        """
        Decide whether an expression may name a type.

        Args:
            type_name: Fully-qualified type name (e.g. "builtins.str")

        Returns:
            True if the namespace is unrestricted, or the exact name is an
            allowed type or allowed supertype

        Raises:
            InvalidArgumentError: If type_name is not a non-empty string
        """
        _check_name("type_name", type_name)
        if not classify.is_namespace_blocked_for_type_reference(self.store, type_name):
            return True
        return (
            type_name in self.store.allowed_type_names
            or type_name in self.store.allowed_supertype_names
        )

    def is_member_access_allowed(self, target: Any, member_name: str) -> bool:
        """
        Decide whether an expression may access a member of ``target``.

        Args:
            target: None (no receiver), a class (static access) or any other
                object (instance access)
            member_name: Attribute or method name being accessed

        Returns:
            True if the access is permitted

        Raises:
            InvalidArgumentError: If member_name is not a non-empty string
        """
        _check_name("member_name", member_name)

        if target is None:
            return True

        if member_name in UNIVERSAL_MEMBERS:
            return True

        if isinstance(target, type):
            return (
                member_name in TYPE_NAME_MEMBERS
                or self.is_type_reference_allowed(qualified_name(target))
            )

        origin = alias_origin(target)
        if origin is not None:
            if isinstance(origin, type):
                return self.is_member_access_allowed(origin, member_name)
            # Special-form origins (typing.Union, typing.Literal) hold no class.
            return True

        return self._is_member_allowed_for_instance_of(type(target), member_name)

    def is_member_access_allowed_for_type(self, cls: type, member_name: str) -> bool:
        """
        Decide whether a member may be accessed on instances of ``cls``.

        Gives the verdict is_member_access_allowed() would give for an
        instance of ``cls``, without needing an instance.

        Raises:
            InvalidArgumentError: If cls is not a class or member_name is
                not a non-empty string
        """
        if not isinstance(cls, type):
            raise InvalidArgumentError(argument="cls", value=repr(cls))
        _check_name("member_name", member_name)
        if member_name in UNIVERSAL_MEMBERS:
            return True
        return self._is_member_allowed_for_instance_of(cls, member_name)

    def type_shape(self, cls: type) -> TypeShape:
        """Classify a runtime type into the shapes the instance rules know."""
        if is_enum_type(cls):
            return TypeShape.ENUM
        if is_annotation_type(cls):
            return TypeShape.ANNOTATION
        if is_proxy_type(cls):
            return TypeShape.PROXY
        if cls in self.store.allowed_types:
            return TypeShape.ALLOWED_CONCRETE
        return TypeShape.OTHER

    def _is_member_allowed_for_instance_of(self, cls: type, member_name: str) -> bool:
        if not classify.is_namespace_blocked_for_all_purposes(self.store, qualified_name(cls)):
            return True

        # Enums, annotation forms, proxies and allowed types pass whole.
        if self.type_shape(cls) is not TypeShape.OTHER:
            return True

        # Otherwise only members an allowed supertype declares itself.
        return any(
            member_name in members and issubclass(cls, supertype)
            for supertype, members in self.store.allowed_supertypes
        )

    # =========================================================================
    # Policy Snapshots
    # =========================================================================

    def list_blocked_namespaces(self) -> list[str]:
        """Return the namespaces blocked for all purposes, sorted, as ``pkg.*``."""
        return sorted(f"{prefix}{_WILDCARD}" for prefix in self.store.blocked_namespaces)

    def list_blocked_type_reference_namespaces(self) -> list[str]:
        """Return the namespaces blocked for type references only, sorted, as ``pkg.*``."""
        return sorted(
            f"{prefix}{_WILDCARD}" for prefix in self.store.blocked_type_reference_namespaces
        )

    def list_allowed_types(self) -> list[str]:
        """
        Return everything the policy re-admits inside blocked namespaces.

        Allowed types and supertypes appear by name, allowed namespaces as
        ``pkg.*``; the list is sorted.
        """
        entries = set(self.store.allowed_type_names)
        entries.update(self.store.allowed_supertype_names)
        entries.update(f"{prefix}{_WILDCARD}" for prefix in self.store.allowed_namespaces)
        return sorted(entries)


def _check_name(argument: str, value: object) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(argument=argument, value=repr(value))
