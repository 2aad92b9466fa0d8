from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import (
    APIGatewayProxyEventV2,
    event_source,
)
from aws_lambda_powertools.utilities.typing import LambdaContext

from hotel_booking.payment.applications.authorize_card import AuthorizeCardService
from hotel_booking.payment.domain.value_object import CardDetails
from hotel_booking.payment.infrastructure.authorize_net_gateway import (
    AuthorizeNetGateway,
)
from hotel_booking.reservation.applications.create_reservation import (
    CreateReservationService,
)
from hotel_booking.reservation.domain.factory import (
    ReservationDetails,
    ReservationFactory,
)
from hotel_booking.reservation.domain.service import (
    ConfirmationNumberAllocator,
    DuplicateReservationGuard,
)
from hotel_booking.reservation.handlers.request_models import CreateReservationRequest
from hotel_booking.reservation.handlers.response_models import (
    ErrorResponse,
    to_response,
)
from hotel_booking.reservation.infrastructure.dynamodb_reservation_repository import (
    DynamoDBReservationRepository,
)
from hotel_booking.reservation.infrastructure.eventbridge_reservation_notifier import (
    EventBridgeReservationNotifier,
)
from hotel_booking.shared.domain import Deadline
from hotel_booking.shared.domain.exception import (
    DomainException,
    DuplicateReservationException,
)
from hotel_booking.shared.infrastructure.fernet_secret_codec import FernetSecretCodec
from hotel_booking.shared.utils import api_response, resolve_error

logger = Logger()

repository = DynamoDBReservationRepository()
service = CreateReservationService(
    repository=repository,
    factory=ReservationFactory(),
    duplicate_guard=DuplicateReservationGuard(repository),
    allocator=ConfirmationNumberAllocator(repository),
    authorizer=AuthorizeCardService(AuthorizeNetGateway()),
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


def _to_details(request: CreateReservationRequest) -> ReservationDetails:
    details: ReservationDetails = {
        "hotel_id": request.hotel_id,
        "guest_name": request.guest_name,
        "email": request.email,
        "phone": request.phone,
        "nationality": request.nationality,
        "check_in_date": request.check_in_date,
        "check_out_date": request.check_out_date,
        "rooms": [
            {
                "room_type": room.room_type,
                "display_name": room.display_name,
                "count": room.count,
            }
            for room in request.rooms
        ],
        "total_amount": request.total_amount,
        "currency": request.currency,
        "payment_mode": request.payment_mode,
        "commission": request.commission,
        "reserved_by": request.reserved_by,
    }
    return details


@logger.inject_lambda_context
@event_source(data_class=APIGatewayProxyEventV2)
def lambda_handler(event: APIGatewayProxyEventV2, context: LambdaContext) -> dict:
    """予約作成 Lambda ハンドラ"""
    logger.info("Received create reservation request")

    try:
        request = CreateReservationRequest.model_validate(event.json_body or {})
        card = (
            CardDetails(
                number=request.card.number,
                expiry=request.card.expiry,
                cvv=request.card.cvv,
                holder_name=request.card.holder_name,
            )
            if request.card
            else None
        )
    except ValueError as e:
        # pydantic.ValidationError / JSON デコードエラーを含む
        logger.warning("Invalid create reservation request", extra={"error": str(e)})
        return _error(400, "VALIDATION_ERROR", "Invalid request body")

    try:
        reservation = service.create(
            _to_details(request),
            card=card,
            deadline=Deadline.from_lambda_context(context),
        )
    except DuplicateReservationException as e:
        logger.info(
            "Duplicate reservation rejected",
            extra={"existing_confirmation_number": e.existing_confirmation_number},
        )
        return _error(
            409,
            "DUPLICATE_RESERVATION",
            str(e),
            existing_confirmation_number=e.existing_confirmation_number,
        )
    except DomainException as e:
        status_code, error_code = resolve_error(e)
        if status_code >= 500:
            logger.exception("Reservation creation failed")
        else:
            logger.warning(
                "Reservation creation rejected", extra={"error_code": error_code}
            )
        return _error(status_code, error_code, str(e))

    return api_response(201, to_response(reservation))
