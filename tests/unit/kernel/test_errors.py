"""Unit tests for the kernel error hierarchy."""
from __future__ import annotations

import json

import pytest

from mp_reliability.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InfrastructureTimeoutError,
    NotFoundError,
    ValidationError,
)


class TestBaseError:
    def test_default_code(self) -> None:
        err = BaseError("boom")
        assert err.code == "base_error"
        assert err.message == "boom"

    def test_explicit_code_wins(self) -> None:
        assert BaseError("boom", code="custom").code == "custom"

    def test_str_is_json(self) -> None:
        payload = json.loads(str(BaseError("boom", detail={"k": 1})))
        assert payload == {"code": "base_error", "message": "boom", "detail": {"k": 1}}

    def test_cause_is_chained(self) -> None:
        cause = RuntimeError("root")
        err = BaseError("wrapped", cause=cause)
        assert err.__cause__ is cause
        assert "cause" in err.to_dict()


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ValidationError, ConflictError],
    )
    def test_domain_errors(self, cls: type[BaseError]) -> None:
        assert issubclass(cls, DomainError)

    def test_not_found_is_domain_error(self) -> None:
        assert issubclass(NotFoundError, DomainError)

    def test_timeout_is_infrastructure_error(self) -> None:
        assert issubclass(InfrastructureTimeoutError, InfrastructureError)

    def test_application_error_is_base(self) -> None:
        assert issubclass(ApplicationError, BaseError)


class TestValidationError:
    def test_carries_field_errors(self) -> None:
        err = ValidationError("bad", errors=[{"field": "target", "message": "must exceed threshold"}])
        assert err.errors[0]["field"] == "target"
        assert err.to_dict()["errors"] == err.errors

    def test_errors_default_empty(self) -> None:
        assert ValidationError("bad").errors == []


class TestNotFoundError:
    def test_message_includes_identifier(self) -> None:
        err = NotFoundError("SLO target", "api_availability")
        assert err.message == "SLO target 'api_availability' not found"
        assert err.code == "not_found"

    def test_message_without_identifier(self) -> None:
        assert NotFoundError("SLO target").message == "SLO target not found"


class TestInfrastructureTimeoutError:
    def test_keeps_timeout(self) -> None:
        err = InfrastructureTimeoutError("slow", timeout_seconds=2.5)
        assert err.timeout_seconds == 2.5
        assert err.code == "infrastructure_timeout"
