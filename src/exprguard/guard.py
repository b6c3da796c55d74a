"""
Access guard helpers for expression evaluators.

The policy engine answers yes or no. Evaluators usually want the opposite
shape: perform the access, or fail the expression. These helpers do the
check and the access together so an integration cannot forget the check:

    value = guarded_getattr(user, "email")
    cls = resolve_type_reference("datetime.date")

Denials raise AccessDeniedError subclasses that name only the type and the
member involved. Denials are logged at DEBUG level; argument errors from the
engine propagate unchanged.
"""

import logging
from typing import Any

from exprguard.errors import MemberAccessDeniedError, TypeReferenceDeniedError
from exprguard.policy.engine import PolicyEngine
from exprguard.policy.introspect import alias_origin, load_type, qualified_name

logger = logging.getLogger(__name__)


def require_type_reference(type_name: str, engine: PolicyEngine | None = None) -> None:
    """
    Ensure an expression may name a type.

    Raises:
        TypeReferenceDeniedError: If the policy denies the reference
        InvalidArgumentError: If type_name is not a non-empty string
    """
    engine = engine or PolicyEngine()
    if not engine.is_type_reference_allowed(type_name):
        logger.debug("Denied type reference %s", type_name)
        raise TypeReferenceDeniedError(type_name=type_name)


def require_member_access(
    target: Any,
    member_name: str,
    engine: PolicyEngine | None = None,
) -> None:
    """
    Ensure an expression may access ``member_name`` on ``target``.

    Raises:
        MemberAccessDeniedError: If the policy denies the access
        InvalidArgumentError: If member_name is not a non-empty string
    """
    engine = engine or PolicyEngine()
    if not engine.is_member_access_allowed(target, member_name):
        origin = alias_origin(target)
        if isinstance(origin, type):
            target = origin
        static = isinstance(target, type)
        type_name = qualified_name(target if static else type(target))
        logger.debug("Denied %s access %s.%s", "static" if static else "member", type_name, member_name)
        raise MemberAccessDeniedError(type_name=type_name, member=member_name, static=static)


def guarded_getattr(target: Any, member_name: str, engine: PolicyEngine | None = None) -> Any:
    """Check the policy, then return ``getattr(target, member_name)``."""
    require_member_access(target, member_name, engine)
    return getattr(target, member_name)


def resolve_type_reference(type_name: str, engine: PolicyEngine | None = None) -> type:
    """
    Check the policy, then resolve a fully-qualified type name to its class.

    Raises:
        TypeReferenceDeniedError: If the policy denies the reference
        TypeResolutionError: If the name is allowed but names no class
    """
    require_type_reference(type_name, engine)
    return load_type(type_name)
