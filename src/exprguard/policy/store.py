"""
Compiled, immutable policy tables.

A PolicyStore is built once from a PolicyConfig and then only read. Building
it does the expensive work up front:

    - prefix tables become PrefixIndex instances
    - allowed type names are resolved to class objects, so instance checks
      compare identities rather than names
    - the members each allowed supertype declares are captured once

Names that do not resolve in this interpreter (a module that is not
installed, or a name from another platform's type system) keep their effect
on type references, which are decided by name, and take no part in instance
checks, which need a class.

The store is frozen and holds only tuples, frozensets and PrefixIndex
objects, so one instance can be shared by any number of threads.
"""

import functools
import logging
from dataclasses import dataclass

from exprguard.policy.classify import PrefixIndex
from exprguard.policy.introspect import declared_member_names, resolve_type
from exprguard.schema import PolicyConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyStore:
    """
    Read-only policy tables in the form the engines consume.

    Attributes:
        config: The configuration this store was compiled from
        blocked_namespaces: Namespaces blocked for all purposes
        allowed_namespaces: Overrides carved out of blocked namespaces
        blocked_type_reference_namespaces: Namespaces blocked for type references
        allowed_type_names: Exact names of allowed concrete types
        allowed_supertype_names: Exact names of allowed supertypes
        allowed_types: Resolved classes of allowed concrete types
        allowed_supertypes: Resolved supertypes paired with the member names
            they declare directly
    """

    config: PolicyConfig
    blocked_namespaces: PrefixIndex
    allowed_namespaces: PrefixIndex
    blocked_type_reference_namespaces: PrefixIndex
    allowed_type_names: frozenset[str]
    allowed_supertype_names: frozenset[str]
    allowed_types: frozenset[type]
    allowed_supertypes: tuple[tuple[type, frozenset[str]], ...]

    @classmethod
    def from_config(cls, config: PolicyConfig) -> "PolicyStore":
        """Compile a PolicyConfig into a PolicyStore."""
        allowed_types = []
        for name in config.allowed_types:
            resolved = resolve_type(name)
            if resolved is None:
                logger.debug("Allowed type %s does not resolve; name checks only", name)
            else:
                allowed_types.append(resolved)

        allowed_supertypes = []
        for name in config.allowed_supertypes:
            resolved = resolve_type(name)
            if resolved is None:
                logger.debug("Allowed supertype %s does not resolve; name checks only", name)
            else:
                allowed_supertypes.append((resolved, declared_member_names(resolved)))

        return cls(
            config=config,
            blocked_namespaces=PrefixIndex(config.blocked_namespaces),
            allowed_namespaces=PrefixIndex(config.allowed_namespaces),
            blocked_type_reference_namespaces=PrefixIndex(config.blocked_type_reference_namespaces),
            allowed_type_names=frozenset(config.allowed_types),
            allowed_supertype_names=frozenset(config.allowed_supertypes),
            allowed_types=frozenset(allowed_types),
            allowed_supertypes=tuple(allowed_supertypes),
        )


@functools.lru_cache(maxsize=1)
def default_store() -> PolicyStore:
    """Return the shared store for the built-in policy tables."""
    return PolicyStore.from_config(PolicyConfig())
