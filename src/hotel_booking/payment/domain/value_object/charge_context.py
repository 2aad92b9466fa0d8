from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeContext:
    """ゲートウェイに渡す請求の付帯情報（請求先・注文情報）"""

    invoice_number: str
    guest_name: str
    email: str = ""
    nationality: str = ""
    hotel_id: str = ""
    check_in: str = ""
    check_out: str = ""
    description: str = ""

    @property
    def first_name(self) -> str:
        parts = self.guest_name.split()
        return parts[0] if parts else ""

    @property
    def last_name(self) -> str:
        return " ".join(self.guest_name.split()[1:])
