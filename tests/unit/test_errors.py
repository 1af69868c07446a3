"""
Unit tests for the error taxonomy and response envelopes
"""

import json

import pytest

from core.errors import (
    ERROR_STATUS,
    AuthRequiredError,
    ConflictError,
    ErrorCode,
    ErrorKind,
    ExpiredError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.responses import error_response, success_response


class TestErrorKinds:

    @pytest.mark.parametrize("exc_type, status", [
        (ValidationError, 400),
        (AuthRequiredError, 401),
        (PermissionDeniedError, 403),
        (NotFoundError, 404),
        (ConflictError, 409),
        (InvalidStateError, 400),
        (ExpiredError, 400),
        (InternalError, 500),
    ])
    def test_status_mapping(self, exc_type, status):
        assert exc_type("boom").status_code == status

    def test_every_kind_has_a_status(self):
        assert set(ERROR_STATUS) == set(ErrorKind)

    def test_code_defaults_per_kind(self):
        assert ValidationError("x").code == ErrorCode.VALIDATION_ERROR
        assert ConflictError("x").code == ErrorCode.TRANSACTION_CONFLICT
        assert ExpiredError("x").code == ErrorCode.TOKEN_EXPIRED

    def test_explicit_code_wins(self):
        err = ConflictError("dup", code=ErrorCode.ALREADY_CLAIMED)
        assert err.to_dict() == {"error": "dup", "code": "ALREADY_CLAIMED"}

    def test_invalid_state_carries_current_status(self):
        err = InvalidStateError("no", code=ErrorCode.CAMPAIGN_NOT_ACTIVE, current_status="paused")
        assert err.current_status == "paused"
        assert err.code == ErrorCode.CAMPAIGN_NOT_ACTIVE

    def test_internal_error_hides_message(self):
        err = InternalError("db password leaked in trace", code=ErrorCode.TICKET_GENERATION_FAILED)
        assert err.to_dict() == {"error": "Internal server error", "code": "TICKET_GENERATION_FAILED"}


class TestResponses:

    def test_success_envelope(self):
        response = success_response({"claim_id": "clm_1"}, status_code=201, message="Claimed")
        body = json.loads(response.body)
        assert response.status_code == 201
        assert body == {"success": True, "message": "Claimed", "data": {"claim_id": "clm_1"}}

    def test_success_envelope_extra_fields(self):
        body = json.loads(success_response([], count=0).body)
        assert body == {"success": True, "data": [], "count": 0}

    def test_error_envelope(self):
        response = error_response(NotFoundError("Claim not found", code=ErrorCode.CLAIM_NOT_FOUND))
        assert response.status_code == 404
        assert json.loads(response.body) == {"error": "Claim not found", "code": "CLAIM_NOT_FOUND"}
