from __future__ import annotations

from dataclasses import dataclass

from hotel_booking.payment.domain.value_object.card_details import CardDetails
from hotel_booking.shared.domain.codec import SecretCodec
from hotel_booking.shared.domain.exception import DecryptionFailedException


@dataclass(frozen=True)
class EncryptedCard:
    """暗号化済みカード情報（作成時に一度だけ書き込む）"""

    number: str = ""
    expiry: str = ""
    cvv: str = ""
    holder_name: str = ""

    @classmethod
    def empty(cls) -> EncryptedCard:
        """カード情報なし（未払い・現地払いの予約）"""
        return cls()

    @classmethod
    def encrypt(cls, card: CardDetails, codec: SecretCodec) -> EncryptedCard:
        return cls(
            number=codec.encrypt(card.number),
            expiry=codec.encrypt(card.expiry),
            cvv=codec.encrypt(card.cvv),
            holder_name=codec.encrypt(card.holder_name),
        )

    def is_empty(self) -> bool:
        return not (self.number or self.expiry or self.cvv)

    def decrypt(self, codec: SecretCodec) -> CardDetails:
        """復号して CardDetails を返す

        一部のフィールドが欠けている、または復号結果がカードとして
        不正な場合も DecryptionFailedException とする。
        """
        if not (self.number and self.expiry and self.cvv):
            raise DecryptionFailedException("Stored card details are incomplete")
        try:
            return CardDetails(
                number=codec.decrypt(self.number),
                expiry=codec.decrypt(self.expiry),
                cvv=codec.decrypt(self.cvv),
                holder_name=codec.decrypt(self.holder_name),
            )
        except ValueError as e:
            raise DecryptionFailedException(
                "Decrypted card details are missing or invalid"
            ) from e
