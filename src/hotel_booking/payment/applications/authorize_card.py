from decimal import Decimal

from aws_lambda_powertools import Logger

from hotel_booking.payment.domain.gateway import PaymentGateway
from hotel_booking.payment.domain.value_object import CardDetails, ChargeContext
from hotel_booking.shared.domain import Currency, Deadline, Money

logger = Logger(child=True)

VERIFICATION_HOLD_AMOUNT = Money(Decimal("0.10"), Currency.usd())


class AuthorizeCardService:
    """カードの有効性確認のための与信（オーソリのみ）ユースケース

    宿泊総額ではなく少額の確認用金額だけをホールドする。
    実際の代金は後から CapturePaymentService で請求する。
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        verification_amount: Money = VERIFICATION_HOLD_AMOUNT,
    ) -> None:
        self._gateway = gateway
        self._verification_amount = verification_amount

    def authorize(
        self,
        card: CardDetails,
        context: ChargeContext,
        deadline: Deadline | None = None,
    ) -> str:
        """与信を行いホールド参照を返す

        拒否・通信障害は例外のまま呼び出し元へ伝播する。
        """
        deadline = deadline or Deadline.unbounded()
        hold_reference = self._gateway.authorize_only(
            card, self._verification_amount, context, deadline
        )
        logger.info(
            "Card authorized",
            extra={
                "invoice_number": context.invoice_number,
                "hold_reference": hold_reference,
                "card_last4": card.last4,
            },
        )
        return hold_reference
