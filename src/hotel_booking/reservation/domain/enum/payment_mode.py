from enum import Enum


class PaymentMode(str, Enum):
    """支払い区分"""

    NOT_PAID = "Not Paid"
    DEPOSIT_PAID = "Deposit Paid"
    PAID_ONLINE = "Paid Online"
    PAID_OFFLINE = "Paid Offline"

    @property
    def requires_card(self) -> bool:
        """作成時にカードの与信が必要な区分か"""
        return self in (PaymentMode.DEPOSIT_PAID, PaymentMode.PAID_ONLINE)
