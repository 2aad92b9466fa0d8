from .gateway import PaymentGateway as PaymentGateway
from .value_object import CardDetails as CardDetails
from .value_object import ChargeContext as ChargeContext
from .value_object import EncryptedCard as EncryptedCard
