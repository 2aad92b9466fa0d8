from .payment_mode import PaymentMode

__all__ = ["PaymentMode"]
