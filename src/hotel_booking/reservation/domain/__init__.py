from .entity import Reservation as Reservation
from .enum import PaymentMode as PaymentMode
from .factory import ReservationFactory as ReservationFactory
from .notifier import ReservationNotifier as ReservationNotifier
from .repository import ReservationRepository as ReservationRepository
from .value_object import ConfirmationNumber as ConfirmationNumber
