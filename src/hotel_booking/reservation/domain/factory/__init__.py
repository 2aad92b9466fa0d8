from .reservation_factory import (
    ReservationCandidate,
    ReservationDetails,
    ReservationFactory,
    RoomDetails,
)

__all__ = ["ReservationCandidate", "ReservationDetails", "ReservationFactory", "RoomDetails"]
