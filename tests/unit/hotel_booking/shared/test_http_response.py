import json

from hotel_booking.shared.domain.exception import (
    CaptureInProgressException,
    DomainException,
    DuplicateReservationException,
    GatewayDeclinedException,
    OptimisticLockException,
    ValidationException,
)
from hotel_booking.shared.utils import api_response, resolve_error


class TestHttpResponse:
    def test_api_response_serializes_body(self):
        response = api_response(201, {"status": "success"})
        assert response["statusCode"] == 201
        assert response["headers"]["Content-Type"] == "application/json"
        assert json.loads(response["body"]) == {"status": "success"}

    def test_resolve_error_uses_most_specific_class(self):
        assert resolve_error(CaptureInProgressException("busy")) == (
            409,
            "CAPTURE_IN_PROGRESS",
        )
        assert resolve_error(OptimisticLockException("stale")) == (409, "CONFLICT")

    def test_resolve_error_known_codes(self):
        assert resolve_error(ValidationException("x")) == (400, "VALIDATION_ERROR")
        assert resolve_error(GatewayDeclinedException("declined")) == (
            402,
            "PAYMENT_DECLINED",
        )
        assert resolve_error(DuplicateReservationException("1234567890")) == (
            409,
            "DUPLICATE_RESERVATION",
        )

    def test_resolve_error_falls_back_to_internal_error(self):
        assert resolve_error(DomainException("unknown")) == (500, "INTERNAL_ERROR")
