"""
Exception hierarchy for exprguard.

All exprguard exceptions inherit from ExprGuardError, allowing callers to
catch every library-specific exception with a single except clause.

Exception Categories:
    - InvalidArgumentError: Caller passed a null/empty name or a non-class
    - AccessDeniedError: Raised by the access guard when the policy denies
    - TypeResolutionError: An allowed type name names no class
    - PolicyConfigError: A policy file or table failed validation

Design Principles:
    - Argument errors are never turned into allow/deny verdicts
    - The decision engine returns booleans; only exprguard.guard raises
      access errors, and those carry the type and member names only
    - All errors have error codes for programmatic handling
    - Errors are designed to be both human-readable and machine-parseable
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Argument errors: 1xxx
ERROR_INVALID_ARGUMENT = 1001

# Access errors: 2xxx
ERROR_ACCESS_DENIED = 2001
ERROR_TYPE_REFERENCE_DENIED = 2002
ERROR_MEMBER_ACCESS_DENIED = 2003
ERROR_TYPE_RESOLUTION = 2004

# Configuration errors: 3xxx
ERROR_POLICY_INVALID = 3001
ERROR_POLICY_NOT_FOUND = 3002


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class ExprGuardError(Exception):
    """
    Base exception for all exprguard errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Argument Errors
# =============================================================================


@dataclass
class InvalidArgumentError(ExprGuardError):
    """
    Raised when a policy query receives a malformed argument.

    This is a bug in the caller, not a security decision: a null or empty
    type name must never be reported as "denied" (or "allowed").

    Attributes:
        argument: Name of the offending parameter
        value: repr() of the value that was passed
    """

    argument: str = ""
    value: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid argument {self.argument}: {self.value}"
        if self.code == 0:
            self.code = ERROR_INVALID_ARGUMENT
        self.context.update({
            "argument": self.argument,
            "value": self.value,
        })


# =============================================================================
# Access Errors
# =============================================================================


@dataclass
class AccessDeniedError(ExprGuardError):
    """
    Raised by the access guard when the policy denies an access.

    The error deliberately names only what was asked for. Which policy table
    produced the verdict is not reported.

    Attributes:
        type_name: Fully-qualified name of the type involved
    """

    type_name: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Access denied: {self.type_name}"
        if self.code == 0:
            self.code = ERROR_ACCESS_DENIED
        self.context["type_name"] = self.type_name


@dataclass
class TypeReferenceDeniedError(AccessDeniedError):
    """Raised when an expression names a type it may not reference."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Type reference not allowed: {self.type_name}"
        if self.code == 0:
            self.code = ERROR_TYPE_REFERENCE_DENIED
        super().__post_init__()


@dataclass
class MemberAccessDeniedError(AccessDeniedError):
    """Raised when an expression accesses a member it may not access."""

    member: str = ""
    static: bool = False

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            kind = "Static member" if self.static else "Member"
            self.message = f"{kind} access not allowed: {self.type_name}.{self.member}"
        if self.code == 0:
            self.code = ERROR_MEMBER_ACCESS_DENIED
        super().__post_init__()
        self.context.update({
            "member": self.member,
            "static": self.static,
        })


@dataclass
class TypeResolutionError(ExprGuardError):
    """
    Raised when a type name that passed the policy does not name a class.

    Not a denial: the reference was allowed, there is just nothing there.
    """

    type_name: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Cannot resolve type: {self.type_name}"
        if self.code == 0:
            self.code = ERROR_TYPE_RESOLUTION
        if not self.suggestion:
            self.suggestion = "Check the module is installed and the name is spelled correctly"
        self.context.update({
            "type_name": self.type_name,
            "underlying_error": self.underlying_error,
        })


# =============================================================================
# Configuration Errors
# =============================================================================


@dataclass
class PolicyConfigError(ExprGuardError):
    """
    Raised when a policy fails to load or validate.

    Attributes:
        source: Where the policy came from (file path or "<string>")
        underlying_error: The validation or parse error text
    """

    source: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid policy {self.source}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_POLICY_INVALID
        self.context.update({
            "source": self.source,
            "underlying_error": self.underlying_error,
        })


@dataclass
class PolicyNotFoundError(PolicyConfigError):
    """Raised when a policy file does not exist."""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Policy file not found: {self.source}"
        if self.code == 0:
            self.code = ERROR_POLICY_NOT_FOUND
        if not self.suggestion:
            self.suggestion = "Pass an existing YAML file with --policy or unset EXPRGUARD_POLICY"
        super().__post_init__()
