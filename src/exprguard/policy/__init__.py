"""
Policy module for exprguard.

This module implements the access-control policy for template expressions:
which types an expression may name, and which members it may reach on the
values it has.

Key concepts:
    - PolicyStore: Immutable compiled tables (blocked/allowed namespaces,
      allowed types, allowed supertypes)
    - Classification: Namespace checks on fully-qualified type names
    - PolicyEngine: The allow/deny decisions the evaluator asks for

The policy is the security boundary of an expression evaluator. It must be:
    - Consulted before every type resolution and member access
    - Predictable: Same inputs always produce same decisions
    - Lock-free: The tables never change after construction
"""

from exprguard.policy.classify import PrefixIndex
from exprguard.policy.engine import PolicyEngine
from exprguard.policy.introspect import TypeShape, qualified_name
from exprguard.policy.store import PolicyStore, default_store

__all__ = [
    "PolicyEngine",
    "PolicyStore",
    "PrefixIndex",
    "TypeShape",
    "default_store",
    "qualified_name",
]
