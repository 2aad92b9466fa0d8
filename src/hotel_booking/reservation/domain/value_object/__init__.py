from .confirmation_number import ConfirmationNumber
from .guest_identity import GuestIdentity, normalize_name, normalize_phone
from .payment_details import PaymentDetails
from .room_selection import RoomLine, RoomSelection
from .stay_period import StayPeriod

__all__ = [
    "ConfirmationNumber",
    "GuestIdentity",
    "PaymentDetails",
    "RoomLine",
    "RoomSelection",
    "StayPeriod",
    "normalize_name",
    "normalize_phone",
]
