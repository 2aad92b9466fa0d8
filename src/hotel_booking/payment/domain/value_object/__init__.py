from .card_details import CardDetails
from .charge_context import ChargeContext
from .encrypted_card import EncryptedCard

__all__ = ["CardDetails", "ChargeContext", "EncryptedCard"]
