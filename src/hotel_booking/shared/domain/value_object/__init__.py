from .currency import Currency
from .deadline import Deadline
from .money import Money
from .retry_policy import RetryPolicy

__all__ = ["Currency", "Money", "Deadline", "RetryPolicy"]
