from .http_response import api_response, resolve_error
from .validators import MAX_AMOUNT, to_decimal

__all__ = ["MAX_AMOUNT", "api_response", "resolve_error", "to_decimal"]
