"""
exprguard - Deny-by-default access policy for template expression evaluators.

Template expression languages let template text name types and reach
attributes through reflection. exprguard is the gate an evaluator consults
before each of those steps:
- Namespace blocking with narrow overrides
- Explicitly allowed concrete types and supertypes
- Member-level capability checks for values of internal types
- Declarative YAML policies and a CLI to inspect them

Example usage:
    >>> import exprguard
    >>> exprguard.is_type_reference_allowed("subprocess.Popen")
    False
    >>> exprguard.is_member_access_allowed({"a": 1}, "get")
    True

    $ exprguard check-type subprocess.Popen
    $ exprguard blocked --json
"""

from typing import Any

from exprguard.errors import ExprGuardError, InvalidArgumentError
from exprguard.policy import PolicyEngine, PolicyStore

__version__ = "0.1.0"
__author__ = "exprguard Contributors"


def is_type_reference_allowed(type_name: str) -> bool:
    """Decide a type reference with the built-in policy."""
    return PolicyEngine().is_type_reference_allowed(type_name)


def is_member_access_allowed(target: Any, member_name: str) -> bool:
    """Decide a member access with the built-in policy."""
    return PolicyEngine().is_member_access_allowed(target, member_name)


__all__ = [
    "__version__",
    "__author__",
    "ExprGuardError",
    "InvalidArgumentError",
    "PolicyEngine",
    "PolicyStore",
    "is_member_access_allowed",
    "is_type_reference_allowed",
]
