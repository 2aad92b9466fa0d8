from abc import ABC, abstractmethod

from hotel_booking.payment.domain.value_object import CardDetails, ChargeContext
from hotel_booking.shared.domain import Deadline, Money


class PaymentGateway(ABC):
    """外部決済ゲートウェイのインターフェース

    失敗は例外で表す:
    - GatewayDeclinedException: 拒否（理由はゲートウェイの文言そのまま）
    - HoldNotFoundException: 与信が失効・不明（capture_hold のみ）
    - GatewayUnreachableException: 通信障害・タイムアウト
    """

    @abstractmethod
    def authorize_only(
        self, card: CardDetails, amount: Money, context: ChargeContext, deadline: Deadline
    ) -> str:
        """与信のみ（資金移動なし）。ホールド参照を返す"""
        raise NotImplementedError

    @abstractmethod
    def capture_hold(
        self, hold_reference: str, amount: Money, context: ChargeContext, deadline: Deadline
    ) -> str:
        """既存ホールドに対して売上確定する。取引 ID を返す"""
        raise NotImplementedError

    @abstractmethod
    def authorize_and_capture(
        self, card: CardDetails, amount: Money, context: ChargeContext, deadline: Deadline
    ) -> str:
        """与信と売上確定を同時に行う（直接請求）。取引 ID を返す"""
        raise NotImplementedError
