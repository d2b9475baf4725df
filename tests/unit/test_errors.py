"""
Unit tests for error hierarchy.

Tests cover:
- Base SanctionError behavior
- AccessDeniedError and denial_exception
- Rule errors with context
- Policy load errors
- Error serialization
"""

import pytest

from sanction.errors import (
    ERROR_ACCESS_DENIED,
    ERROR_POLICY_LOAD,
    ERROR_RULE_INVALID_TYPE,
    AccessDeniedError,
    InvalidRuleTypeError,
    PolicyLoadError,
    RuleError,
    SanctionError,
    denial_exception,
)


class TestSanctionError:
    """Tests for base SanctionError."""

    def test_basic_error(self) -> None:
        """Create a basic error with message."""
        err = SanctionError(message="Something went wrong", code=9999)
        assert err.message == "Something went wrong"
        assert err.code == 9999
        assert err.suggestion is None
        assert err.context == {}

    def test_str_format(self) -> None:
        """String format includes code and message."""
        err = SanctionError(message="Test error", code=1234)
        assert str(err) == "[E1234] Test error"

    def test_str_with_suggestion(self) -> None:
        err = SanctionError(message="Failed", code=1, suggestion="Try again")
        assert "Suggestion: Try again" in str(err)

    def test_repr_format(self) -> None:
        """Repr includes class name and details."""
        err = SanctionError(message="Test", code=1)
        assert repr(err).startswith("SanctionError(")
        assert "message='Test'" in repr(err)

    def test_to_dict(self) -> None:
        """Errors serialize to a dict."""
        err = SanctionError(message="Test", code=1, context={"key": "value"})
        assert err.to_dict() == {
            "error_type": "SanctionError",
            "message": "Test",
            "code": 1,
            "suggestion": None,
            "context": {"key": "value"},
        }

    def test_catchable_as_exception(self) -> None:
        with pytest.raises(SanctionError):
            raise InvalidRuleTypeError(layer="privilege", rule_type="int")


class TestAccessDeniedError:
    """Tests for AccessDeniedError."""

    def test_defaults(self) -> None:
        err = AccessDeniedError()
        assert err.code == ERROR_ACCESS_DENIED
        assert err.message == "Access denied"
        assert err.cause is None

    def test_cause_in_message_and_context(self) -> None:
        err = AccessDeniedError(cause="no admin")
        assert err.message == "Access denied: no admin"
        assert err.context["cause"] == "no admin"

    def test_cause_kept_verbatim(self) -> None:
        """Non-string causes are attached unchanged."""
        cause = {"scope": "repo:write"}
        assert AccessDeniedError(cause=cause).cause is cause


class TestDenialException:
    """Tests for denial_exception."""

    def test_exception_cause_returned(self) -> None:
        cause = PermissionError("nope")
        assert denial_exception(cause) is cause

    def test_other_cause_wrapped(self) -> None:
        err = denial_exception("nope")
        assert isinstance(err, AccessDeniedError)
        assert err.cause == "nope"


class TestRuleErrors:
    """Tests for structural rule errors."""

    def test_invalid_rule_type(self) -> None:
        err = InvalidRuleTypeError(layer="permit", rule_type="int")
        assert isinstance(err, RuleError)
        assert err.code == ERROR_RULE_INVALID_TYPE
        assert err.message == "Invalid permit rule type: int"
        assert err.suggestion is not None
        assert err.context == {"layer": "permit", "rule_type": "int"}


class TestPolicyLoadError:
    """Tests for PolicyLoadError."""

    def test_with_path(self) -> None:
        err = PolicyLoadError(path="grants.yaml", underlying_error="bad yaml")
        assert err.code == ERROR_POLICY_LOAD
        assert "grants.yaml" in err.message
        assert err.context["underlying_error"] == "bad yaml"

    def test_without_path(self) -> None:
        err = PolicyLoadError(underlying_error="bad yaml")
        assert "<string>" in err.message
