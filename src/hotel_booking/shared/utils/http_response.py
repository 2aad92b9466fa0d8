import json

from hotel_booking.shared.domain.exception import (
    AllocationExhaustedException,
    AlreadyCapturedException,
    CaptureAmountExceedsBalanceException,
    CaptureInProgressException,
    DeadlineExceededException,
    DecryptionFailedException,
    DomainException,
    DuplicateReservationException,
    GatewayDeclinedException,
    GatewayUnreachableException,
    OptimisticLockException,
    ResourceNotFoundException,
    SettlementNotRecordedException,
    ValidationException,
)

# (HTTP ステータス, error_code)。例外クラスの MRO 順に探索する
ERROR_MAPPING: dict[type[DomainException], tuple[int, str]] = {
    ValidationException: (400, "VALIDATION_ERROR"),
    ResourceNotFoundException: (404, "NOT_FOUND"),
    DuplicateReservationException: (409, "DUPLICATE_RESERVATION"),
    AlreadyCapturedException: (409, "ALREADY_CAPTURED"),
    CaptureAmountExceedsBalanceException: (409, "AMOUNT_EXCEEDS_BALANCE"),
    CaptureInProgressException: (409, "CAPTURE_IN_PROGRESS"),
    OptimisticLockException: (409, "CONFLICT"),
    GatewayDeclinedException: (402, "PAYMENT_DECLINED"),
    GatewayUnreachableException: (502, "GATEWAY_UNREACHABLE"),
    AllocationExhaustedException: (503, "ALLOCATION_EXHAUSTED"),
    DeadlineExceededException: (504, "DEADLINE_EXCEEDED"),
    DecryptionFailedException: (500, "DECRYPTION_FAILED"),
    SettlementNotRecordedException: (500, "SETTLEMENT_NOT_RECORDED"),
}


def api_response(status_code: int, body: dict) -> dict:
    """API Gateway HTTP API のレスポンス形式を生成する"""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, default=str),
    }


def resolve_error(exc: DomainException) -> tuple[int, str]:
    """ドメイン例外を (HTTP ステータス, error_code) に変換する"""
    for klass in type(exc).__mro__:
        if klass in ERROR_MAPPING:
            return ERROR_MAPPING[klass]
    return 500, "INTERNAL_ERROR"
