from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from hotel_booking.reservation.domain.repository import DuplicateCriteria
from hotel_booking.reservation.domain.value_object import ConfirmationNumber
from hotel_booking.reservation.infrastructure.dynamodb_reservation_repository import (
    DynamoDBReservationRepository,
)
from hotel_booking.shared.domain import Money
from hotel_booking.shared.domain.exception import (
    DuplicateResourceException,
    OptimisticLockException,
)


def _client_error(code: str, operation: str = "PutItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def table():
    return MagicMock()


@pytest.fixture
def repository(table):
    return DynamoDBReservationRepository(table_name="test-table", table=table)


class TestDynamoDBReservationRepository:
    def test_save_puts_item_with_unique_condition(
        self, repository, table, create_reservation
    ):
        repository.save(create_reservation())

        kwargs = table.put_item.call_args.kwargs
        item = kwargs["Item"]
        assert item["PK"] == "RESERVATION#1234567890"
        assert item["SK"] == "RESERVATION"
        assert item["GSI1PK"] == "HOTEL#hotel-1#STAY#2025-06-01#2025-06-04"
        assert item["guest_name_key"] == "ahmed ali"
        assert item["guest_nationality"] == "SA"
        assert item["guest_nationality_key"] == "sa"
        assert item["total_amount"] == "300.00"
        assert item["room_signature"] == "double|double room|2"
        assert item["payment"]["transaction_id"] == "hold-1"
        assert item["payment"]["card_number"] != "4111111111111111"
        assert item["version"] == 0
        assert "ConditionExpression" in kwargs

    def test_save_conflict_raises_duplicate_resource(
        self, repository, table, create_reservation
    ):
        table.put_item.side_effect = _client_error("ConditionalCheckFailedException")

        with pytest.raises(DuplicateResourceException):
            repository.save(create_reservation())

    def test_save_other_error_is_propagated(self, repository, table, create_reservation):
        table.put_item.side_effect = _client_error("ProvisionedThroughputExceededException")

        with pytest.raises(ClientError):
            repository.save(create_reservation())

    def test_find_by_id_restores_entity(self, repository, table, create_reservation):
        reservation = create_reservation(paid_amount=Decimal("100"))
        reservation.begin_capture(
            datetime(2025, 6, 1, tzinfo=timezone.utc), timedelta(seconds=60)
        )
        reservation.record_capture(
            "capture-1", Money.of("40", "USD"), Money.of("50", "SAR"), False
        )
        repository.save(reservation)
        table.get_item.return_value = {"Item": table.put_item.call_args.kwargs["Item"]}

        restored = repository.find_by_id(ConfirmationNumber(value="1234567890"))

        assert restored == reservation
        assert restored.guest == reservation.guest
        assert restored.stay_period == reservation.stay_period
        assert restored.rooms == reservation.rooms
        assert restored.paid_amount == Money.of("150", "SAR")
        assert restored.payment == reservation.payment
        assert restored.payment_mode == reservation.payment_mode
        assert restored.created_at == reservation.created_at
        assert restored.version == reservation.version
        assert table.get_item.call_args.kwargs["ConsistentRead"] is True

    def test_find_by_id_not_found(self, repository, table):
        table.get_item.return_value = {}
        assert repository.find_by_id(ConfirmationNumber(value="1234567890")) is None

    def test_exists(self, repository, table):
        table.get_item.return_value = {"Item": {"PK": "RESERVATION#1234567890"}}
        assert repository.exists(ConfirmationNumber(value="1234567890")) is True
        table.get_item.return_value = {}
        assert repository.exists(ConfirmationNumber(value="1234567890")) is False

    def test_find_duplicate_candidates_paginates(
        self, repository, table, create_reservation
    ):
        repository.save(create_reservation(confirmation_number="1111111111"))
        first = table.put_item.call_args.kwargs["Item"]
        repository.save(create_reservation(confirmation_number="2222222222"))
        second = table.put_item.call_args.kwargs["Item"]
        table.query.side_effect = [
            {"Items": [first], "LastEvaluatedKey": {"PK": "x"}},
            {"Items": [second]},
        ]
        criteria = DuplicateCriteria(
            hotel_id="hotel-1",
            check_in=create_reservation().stay_period.check_in,
            check_out=create_reservation().stay_period.check_out,
            total_amount=Money.of("300", "SAR"),
            name_key="ahmed ali",
            email="ahmed@example.com",
            nationality_key="sa",
        )

        candidates = repository.find_duplicate_candidates(criteria)

        assert [str(r.id) for r in candidates] == ["1111111111", "2222222222"]
        first_call, second_call = table.query.call_args_list
        assert first_call.kwargs["IndexName"] == "GSI1"
        assert second_call.kwargs["ExclusiveStartKey"] == {"PK": "x"}

    def test_update_is_version_checked(self, repository, table, create_reservation):
        reservation = create_reservation()
        reservation.begin_capture(
            datetime(2025, 6, 1, tzinfo=timezone.utc), timedelta(seconds=60)
        )

        repository.update(reservation, expected_version=0)

        kwargs = table.update_item.call_args.kwargs
        assert kwargs["Key"] == {"PK": "RESERVATION#1234567890", "SK": "RESERVATION"}
        assert kwargs["ExpressionAttributeValues"][":version"] == 1
        assert kwargs["ExpressionAttributeValues"][":payment"]["capturing"] is True
        assert "ConditionExpression" in kwargs

    def test_update_conflict_raises_optimistic_lock(
        self, repository, table, create_reservation
    ):
        table.update_item.side_effect = _client_error(
            "ConditionalCheckFailedException", "UpdateItem"
        )

        with pytest.raises(OptimisticLockException):
            repository.update(create_reservation(), expected_version=0)
