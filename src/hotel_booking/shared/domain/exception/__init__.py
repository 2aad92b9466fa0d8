from .exceptions import (
    AllocationExhaustedException,
    AlreadyCapturedException,
    BusinessRuleViolationException,
    CaptureAmountExceedsBalanceException,
    CaptureInProgressException,
    DeadlineExceededException,
    DecryptionFailedException,
    DomainException,
    DuplicateReservationException,
    DuplicateResourceException,
    GatewayDeclinedException,
    GatewayUnreachableException,
    HoldNotFoundException,
    OptimisticLockException,
    PaymentException,
    ResourceNotFoundException,
    SettlementNotRecordedException,
    ValidationException,
)

__all__ = [
    "DomainException",
    "ValidationException",
    "ResourceNotFoundException",
    "BusinessRuleViolationException",
    "DuplicateResourceException",
    "OptimisticLockException",
    "DuplicateReservationException",
    "AllocationExhaustedException",
    "PaymentException",
    "GatewayDeclinedException",
    "GatewayUnreachableException",
    "HoldNotFoundException",
    "DecryptionFailedException",
    "AlreadyCapturedException",
    "CaptureAmountExceedsBalanceException",
    "CaptureInProgressException",
    "SettlementNotRecordedException",
    "DeadlineExceededException",
]
