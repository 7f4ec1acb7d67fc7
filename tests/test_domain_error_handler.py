"""Tests for domain error handler to verify structured JSON error responses."""
import json
from datetime import date, datetime

import pytest
from fastapi.responses import JSONResponse

from studio_planner.core.error_handlers import ERROR_STATUS_MAP, domain_error_handler, status_for
from studio_planner.core.exceptions import (
    BusinessRuleError,
    CollaboratorError,
    ConflictError,
    DomainError,
    DuplicateExecutionError,
    ImmutableEntityError,
    NotFoundError,
    ValidationError,
)


class MockRequest:
    """Mock FastAPI Request object for testing."""

    def __init__(self, request_id: str = "test-request-123"):
        self.state = type('State', (), {'request_id': request_id})()


class TestDomainErrorExceptions:
    """Test domain exception classes and their error codes."""

    def test_domain_error_base(self):
        error = DomainError(
            code="TEST_001",
            message="Test error message",
            details={"key": "value"}
        )

        assert error.code == "TEST_001"
        assert error.message == "Test error message"
        assert error.details == {"key": "value"}
        assert str(error) == "Test error message"

    def test_not_found_error(self):
        error = NotFoundError("PlanTemplate", "Plan template t-1 not found", {"id": "t-1"})

        assert error.code == "NF_PLANTEMPLATE_001"
        assert error.message == "Plan template t-1 not found"
        assert error.details == {"id": "t-1"}

    def test_not_found_error_default_message(self):
        error = NotFoundError("allocation")

        assert error.code == "NF_ALLOCATION_001"
        assert error.message == "allocation not found"
        assert error.details == {}

    def test_validation_error(self):
        error = ValidationError("child_sequence", "A compound flow needs at least 2 steps")

        assert error.code == "VAL_CHILD_SEQUENCE_001"
        assert error.message == "Validation failed for child_sequence: A compound flow needs at least 2 steps"
        assert error.details == {"field": "child_sequence"}

    def test_business_rule_error_custom_code(self):
        error = BusinessRuleError(
            "Allocation a-1 has already been executed",
            code="BR_ALLOCATION_EXECUTED",
            details={"allocation_id": "a-1"}
        )

        assert error.code == "BR_ALLOCATION_EXECUTED"
        assert error.details == {"allocation_id": "a-1"}

    def test_conflict_error_default(self):
        error = ConflictError("Resource already exists")

        assert error.code == "CF_001"
        assert error.details == {}

    def test_duplicate_execution_is_a_conflict(self):
        error = DuplicateExecutionError("slot-a", date(2026, 3, 2))

        assert isinstance(error, ConflictError)
        assert error.code == "CF_EXECUTION_EXISTS"
        assert error.details == {"slot_id": "slot-a", "date": "2026-03-02"}
        assert "slot-a" in error.message

    def test_immutable_entity_error(self):
        error = ImmutableEntityError("Execution", "deleted")

        assert error.code == "IMM_EXECUTION_001"
        assert error.message == "Execution records are immutable and cannot be deleted"
        assert error.details == {"operation": "deleted"}

    def test_collaborator_error(self):
        error = CollaboratorError("studio_ops", "Studio operations API unreachable")

        assert error.code == "EXT_STUDIO_OPS_001"
        assert error.details == {"service": "studio_ops"}


class TestErrorStatusMap:
    """Test ERROR_STATUS_MAP mapping."""

    @pytest.mark.parametrize(
        "error_cls, status_code",
        [
            (NotFoundError, 404),
            (ValidationError, 400),
            (BusinessRuleError, 422),
            (ConflictError, 409),
            (DuplicateExecutionError, 409),
            (ImmutableEntityError, 405),
            (CollaboratorError, 502),
        ],
    )
    def test_status_for_error(self, error_cls, status_code):
        assert ERROR_STATUS_MAP[error_cls] == status_code

    def test_subclass_uses_parent_status(self):
        class StaleSnapshotError(ConflictError):
            pass

        assert status_for(StaleSnapshotError("stale")) == 409


class TestDomainErrorHandler:
    """Test domain_error_handler function."""

    @pytest.mark.asyncio
    async def test_not_found_error_response(self):
        error = NotFoundError("Execution", "Execution e-9 not found", {"id": "e-9"})
        request = MockRequest(request_id="req-123")

        response = await domain_error_handler(request, error)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 404

        data = json.loads(response.body.decode())
        assert data["data"] is None
        assert len(data["errors"]) == 1

        error_dict = data["errors"][0]
        assert error_dict["code"] == "NF_EXECUTION_001"
        assert error_dict["message"] == "Execution e-9 not found"
        assert error_dict["details"] == {"id": "e-9"}

    @pytest.mark.asyncio
    async def test_duplicate_execution_response(self):
        error = DuplicateExecutionError("slot-a", date(2026, 3, 2))

        response = await domain_error_handler(MockRequest(), error)

        assert response.status_code == 409
        data = json.loads(response.body.decode())
        assert data["errors"][0]["code"] == "CF_EXECUTION_EXISTS"

    @pytest.mark.asyncio
    async def test_immutable_entity_response(self):
        error = ImmutableEntityError("Execution", "updated", {"execution_id": "e-1"})

        response = await domain_error_handler(MockRequest(), error)

        assert response.status_code == 405
        data = json.loads(response.body.decode())
        assert data["errors"][0]["details"] == {"execution_id": "e-1"}

    @pytest.mark.asyncio
    async def test_response_includes_metadata(self):
        error = NotFoundError("test_entity")
        request = MockRequest(request_id="test-request-id-12345")

        response = await domain_error_handler(request, error)

        data = json.loads(response.body.decode())
        assert data["meta"]["request_id"] == "test-request-id-12345"
        datetime.fromisoformat(data["meta"]["timestamp"].replace('Z', '+00:00'))

    @pytest.mark.asyncio
    async def test_unknown_domain_error_returns_500(self):

        class CustomDomainError(DomainError):
            pass

        error = CustomDomainError("CUSTOM_001", "Custom error message")

        response = await domain_error_handler(MockRequest(request_id="req-custom"), error)

        assert response.status_code == 500
        data = json.loads(response.body.decode())
        assert data["errors"][0]["code"] == "CUSTOM_001"

    @pytest.mark.asyncio
    async def test_error_with_none_request_id(self):
        error = ValidationError("field", "Invalid field")
        request = type('Request', (), {
            'state': type('State', (), {})()
        })()

        response = await domain_error_handler(request, error)

        data = json.loads(response.body.decode())
        assert data["meta"]["request_id"] is None
