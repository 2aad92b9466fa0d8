from .reservation_events import PaymentCaptured, ReservationCreated

__all__ = ["PaymentCaptured", "ReservationCreated"]
