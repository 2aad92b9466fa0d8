from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from hotel_booking.payment.domain.value_object import EncryptedCard
from hotel_booking.shared.domain import Money


@dataclass(frozen=True)
class PaymentDetails:
    """予約の決済サブレコード

    - card: 作成時に一度だけ書き込む暗号化カード情報
    - transaction_id: 与信（ホールド）の参照
    - captured: 一度でも売上確定したか
    - capturing: 請求処理が開始された（実行中・実行済み）印
    - capture_lease_expires_at: 実行中の請求が持つ排他リースの期限
    - charge_count: 完了した請求の回数
    """

    card: EncryptedCard = EncryptedCard()
    transaction_id: str | None = None
    captured: bool = False
    capturing: bool = False
    capture_lease_expires_at: datetime | None = None
    charge_count: int = 0
    final_capture_transaction_id: str | None = None
    last_charged_amount: Money | None = None

    @classmethod
    def unauthorized(cls) -> PaymentDetails:
        """カードなし・与信なし"""
        return cls()

    @classmethod
    def authorized(cls, card: EncryptedCard, transaction_id: str) -> PaymentDetails:
        return cls(card=card, transaction_id=transaction_id)

    def has_active_lease(self, now: datetime) -> bool:
        return (
            self.capture_lease_expires_at is not None
            and self.capture_lease_expires_at > now
        )

    def with_lease(self, expires_at: datetime) -> PaymentDetails:
        return replace(self, capturing=True, capture_lease_expires_at=expires_at)

    def without_lease(self, capturing: bool) -> PaymentDetails:
        return replace(self, capturing=capturing, capture_lease_expires_at=None)

    def with_settlement(self, transaction_id: str, charged: Money) -> PaymentDetails:
        return replace(
            self,
            captured=True,
            capturing=True,
            capture_lease_expires_at=None,
            charge_count=self.charge_count + 1,
            final_capture_transaction_id=transaction_id,
            last_charged_amount=charged,
        )
