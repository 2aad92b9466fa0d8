from .confirmation_number_allocator import ConfirmationNumberAllocator
from .duplicate_reservation_guard import DuplicateReservationGuard

__all__ = ["ConfirmationNumberAllocator", "DuplicateReservationGuard"]
