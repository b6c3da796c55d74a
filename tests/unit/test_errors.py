"""
Unit tests for error hierarchy.

Tests cover:
- Base ExprGuardError behavior
- Argument errors
- Access errors and what they reveal
- Policy configuration errors
- Error serialization
"""

import pytest

from exprguard.errors import (
    ERROR_ACCESS_DENIED,
    ERROR_INVALID_ARGUMENT,
    ERROR_MEMBER_ACCESS_DENIED,
    ERROR_POLICY_INVALID,
    ERROR_POLICY_NOT_FOUND,
    ERROR_TYPE_REFERENCE_DENIED,
    ERROR_TYPE_RESOLUTION,
    AccessDeniedError,
    ExprGuardError,
    InvalidArgumentError,
    MemberAccessDeniedError,
    PolicyConfigError,
    PolicyNotFoundError,
    TypeReferenceDeniedError,
    TypeResolutionError,
)


class TestExprGuardError:
    """Tests for base ExprGuardError."""

    def test_basic_error(self) -> None:
        """Create a basic error with message."""
        err = ExprGuardError(message="Something went wrong", code=9999)
        assert err.message == "Something went wrong"
        assert err.code == 9999
        assert err.suggestion is None
        assert err.context == {}

    def test_str_format(self) -> None:
        """String format includes code and message."""
        err = ExprGuardError(message="Test error", code=1234)
        assert str(err) == "[E1234] Test error"

    def test_str_with_suggestion(self) -> None:
        """Suggestions are shown on their own line."""
        err = ExprGuardError(message="Failed", code=1, suggestion="Try again")
        assert str(err) == "[E1] Failed\nSuggestion: Try again"

    def test_repr_format(self) -> None:
        """Repr includes class name and details."""
        err = ExprGuardError(message="Test", code=1)
        assert "ExprGuardError" in repr(err)
        assert "message='Test'" in repr(err)

    def test_to_dict(self) -> None:
        """Errors serialize for JSON output."""
        err = ExprGuardError(message="Test", code=42, context={"k": "v"})
        assert err.to_dict() == {
            "error_type": "ExprGuardError",
            "message": "Test",
            "code": 42,
            "suggestion": None,
            "context": {"k": "v"},
        }

    def test_is_exception(self) -> None:
        """Errors can be raised and caught."""
        with pytest.raises(ExprGuardError):
            raise ExprGuardError(message="boom", code=1)


class TestInvalidArgumentError:
    """Tests for InvalidArgumentError."""

    def test_defaults(self) -> None:
        """Message and code are derived from the argument."""
        err = InvalidArgumentError(argument="type_name", value="None")
        assert err.code == ERROR_INVALID_ARGUMENT
        assert err.message == "Invalid argument type_name: None"
        assert err.context == {"argument": "type_name", "value": "None"}

    def test_custom_message(self) -> None:
        """An explicit message is kept."""
        err = InvalidArgumentError(argument="interfaces", value="()", message="No interfaces")
        assert err.message == "No interfaces"

    def test_not_an_access_error(self) -> None:
        """Argument errors are never denials."""
        assert not isinstance(InvalidArgumentError(), AccessDeniedError)


class TestAccessErrors:
    """Tests for the access denial errors."""

    def test_access_denied(self) -> None:
        """The generic denial names the type."""
        err = AccessDeniedError(type_name="subprocess.Popen")
        assert err.code == ERROR_ACCESS_DENIED
        assert "subprocess.Popen" in err.message
        assert err.context == {"type_name": "subprocess.Popen"}

    def test_type_reference_denied(self) -> None:
        """Type reference denials keep their own code."""
        err = TypeReferenceDeniedError(type_name="subprocess.Popen")
        assert isinstance(err, AccessDeniedError)
        assert err.code == ERROR_TYPE_REFERENCE_DENIED
        assert err.message == "Type reference not allowed: subprocess.Popen"

    def test_member_access_denied(self) -> None:
        """Member denials name the type and the member."""
        err = MemberAccessDeniedError(type_name="builtins.function", member="__globals__")
        assert isinstance(err, AccessDeniedError)
        assert err.code == ERROR_MEMBER_ACCESS_DENIED
        assert err.message == "Member access not allowed: builtins.function.__globals__"
        assert err.context == {
            "type_name": "builtins.function",
            "member": "__globals__",
            "static": False,
        }

    def test_static_member_access_denied(self) -> None:
        """Static denials say so."""
        err = MemberAccessDeniedError(type_name="builtins.object", member="__subclasses__", static=True)
        assert err.message.startswith("Static member access not allowed")
        assert err.context["static"] is True

    def test_type_resolution(self) -> None:
        """Resolution failures are not denials."""
        err = TypeResolutionError(type_name="myapp.Missing", underlying_error="No module named 'myapp'")
        assert not isinstance(err, AccessDeniedError)
        assert err.code == ERROR_TYPE_RESOLUTION
        assert err.suggestion is not None
        assert err.context["underlying_error"] == "No module named 'myapp'"


class TestPolicyErrors:
    """Tests for policy configuration errors."""

    def test_policy_config_error(self) -> None:
        """Invalid policies name their source."""
        err = PolicyConfigError(source="policy.yaml", underlying_error="bad prefix")
        assert err.code == ERROR_POLICY_INVALID
        assert err.message == "Invalid policy policy.yaml: bad prefix"
        assert err.context == {"source": "policy.yaml", "underlying_error": "bad prefix"}

    def test_policy_not_found(self) -> None:
        """Missing files are a kind of config error."""
        err = PolicyNotFoundError(source="missing.yaml")
        assert isinstance(err, PolicyConfigError)
        assert err.code == ERROR_POLICY_NOT_FOUND
        assert err.message == "Policy file not found: missing.yaml"
        assert "EXPRGUARD_POLICY" in err.suggestion
