from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import (
    APIGatewayProxyEventV2,
    event_source,
)
from aws_lambda_powertools.utilities.typing import LambdaContext

from hotel_booking.payment.applications.capture_payment import CapturePaymentService
from hotel_booking.payment.handlers.request_models import CapturePaymentRequest
from hotel_booking.payment.handlers.response_models import ErrorResponse, to_response
from hotel_booking.payment.infrastructure.authorize_net_gateway import (
    AuthorizeNetGateway,
)
from hotel_booking.reservation.domain.value_object import ConfirmationNumber
from hotel_booking.reservation.infrastructure.dynamodb_reservation_repository import (
    DynamoDBReservationRepository,
)
from hotel_booking.reservation.infrastructure.eventbridge_reservation_notifier import (
    EventBridgeReservationNotifier,
)
from hotel_booking.shared.domain import Deadline, Money
from hotel_booking.shared.domain.exception import (
    DomainException,
    SettlementNotRecordedException,
)
from hotel_booking.shared.infrastructure.fernet_secret_codec import FernetSecretCodec
from hotel_booking.shared.utils import api_response, resolve_error

logger = Logger()

service = CapturePaymentService(
    repository=DynamoDBReservationRepository(),
    gateway=AuthorizeNetGateway(),
    codec=FernetSecretCodec(),
    notifier=EventBridgeReservationNotifier(),
)


def _error(status_code: int, error_code: str, message: str, **extra) -> dict:
    return api_response(
        status_code,
        ErrorResponse(error_code=error_code, message=message, **extra).model_dump(
            exclude_none=True
        ),
    )


@logger.inject_lambda_context
@event_source(data_class=APIGatewayProxyEventV2)
def lambda_handler(event: APIGatewayProxyEventV2, context: LambdaContext) -> dict:
    """請求（売上確定）Lambda ハンドラ"""
    path_params = event.path_parameters or {}

    try:
        confirmation_number = ConfirmationNumber(
            value=path_params.get("confirmation_number", "")
        )
        request = CapturePaymentRequest.model_validate(event.json_body or {})
        amount = Money.of(request.amount, request.currency)
        ledger_amount = (
            Money.of(request.ledger_amount, request.ledger_currency)
            if request.ledger_amount is not None
            else None
        )
    except ValueError as e:
        logger.warning("Invalid capture request", extra={"error": str(e)})
        return _error(400, "VALIDATION_ERROR", "Invalid request")

    logger.append_keys(confirmation_number=str(confirmation_number))
    logger.info("Received capture request", extra={"amount": str(amount)})

    try:
        result = service.capture(
            confirmation_number,
            amount,
            ledger_amount=ledger_amount,
            deadline=Deadline.from_lambda_context(context),
        )
    except SettlementNotRecordedException as e:
        # 請求は成立しているため charged=True で返す
        logger.exception("Capture settled but not recorded")
        status_code, error_code = resolve_error(e)
        return _error(
            status_code,
            error_code,
            str(e),
            charged=True,
            transaction_id=e.settled_reference,
        )
    except DomainException as e:
        status_code, error_code = resolve_error(e)
        if status_code >= 500:
            logger.exception("Capture failed")
        else:
            logger.warning("Capture rejected", extra={"error_code": error_code})
        return _error(status_code, error_code, str(e))

    return api_response(200, to_response(result))
