import os
from datetime import date, datetime
from decimal import Decimal

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from hotel_booking.payment.domain.value_object import EncryptedCard
from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.enum import PaymentMode
from hotel_booking.reservation.domain.repository import (
    DuplicateCriteria,
    ReservationRepository,
)
from hotel_booking.reservation.domain.value_object import (
    ConfirmationNumber,
    GuestIdentity,
    PaymentDetails,
    RoomLine,
    RoomSelection,
    StayPeriod,
)
from hotel_booking.shared.domain import Currency, Money
from hotel_booking.shared.domain.exception.exceptions import (
    DuplicateResourceException,
    OptimisticLockException,
)

DUPLICATE_INDEX_NAME = "GSI1"


def _pk(confirmation_number: ConfirmationNumber | str) -> str:
    return f"RESERVATION#{confirmation_number}"


def _stay_key(hotel_id: str, check_in: date, check_out: date) -> str:
    return f"HOTEL#{hotel_id}#STAY#{check_in.isoformat()}#{check_out.isoformat()}"


class DynamoDBReservationRepository(ReservationRepository):
    """DynamoDBを使用したReservationRepository の具象実装

    - PK = RESERVATION#<確認番号>, SK = RESERVATION
    - GSI1 (GSI1PK = HOTEL#<hotel_id>#STAY#<checkin>#<checkout>) で重複候補を引く
    """

    def __init__(self, table_name: str | None = None, table=None) -> None:
        self.table_name = table_name or os.getenv("TABLE_NAME")
        if table is None:
            self.dynamodb = boto3.resource("dynamodb")
            table = self.dynamodb.Table(self.table_name)
        self.table = table

    def save(self, reservation: Reservation) -> None:
        """予約をDBに保存する（確認番号の一意性を条件付き書き込みで保証）"""
        item = self._to_item(reservation)
        try:
            self.table.put_item(Item=item, ConditionExpression=Attr("PK").not_exists())
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise DuplicateResourceException(
                    f"Reservation already exists: {reservation.id}"
                ) from e
            raise

    def find_by_id(self, confirmation_number: ConfirmationNumber) -> Reservation | None:
        """確認番号で検索"""
        response = self.table.get_item(
            Key={"PK": _pk(confirmation_number), "SK": "RESERVATION"},
            ConsistentRead=True,
        )
        item = response.get("Item")
        if not item:
            return None
        return self._to_entity(item)

    def exists(self, confirmation_number: ConfirmationNumber) -> bool:
        response = self.table.get_item(
            Key={"PK": _pk(confirmation_number), "SK": "RESERVATION"},
            ProjectionExpression="PK",
            ConsistentRead=True,
        )
        return "Item" in response

    def find_duplicate_candidates(self, criteria: DuplicateCriteria) -> list[Reservation]:
        """同じホテル・同じ滞在日・同じ金額・同じ宿泊者の予約を取得する"""
        kwargs: dict = {
            "IndexName": DUPLICATE_INDEX_NAME,
            "KeyConditionExpression": Key("GSI1PK").eq(
                _stay_key(criteria.hotel_id, criteria.check_in, criteria.check_out)
            ),
            "FilterExpression": Attr("total_amount").eq(str(criteria.total_amount.amount))
            & Attr("currency").eq(str(criteria.total_amount.currency))
            & Attr("guest_name_key").eq(criteria.name_key)
            & Attr("guest_email").eq(criteria.email)
            & Attr("guest_nationality_key").eq(criteria.nationality_key),
        }
        reservations: list[Reservation] = []
        while True:
            response = self.table.query(**kwargs)
            reservations.extend(self._to_entity(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return reservations
            kwargs["ExclusiveStartKey"] = last_key

    def update(self, reservation: Reservation, expected_version: int) -> None:
        """決済状態を更新する（version による楽観ロック）"""
        try:
            self.table.update_item(
                Key={"PK": _pk(reservation.id), "SK": "RESERVATION"},
                UpdateExpression=(
                    "SET #payment = :payment, paid_amount = :paid_amount, "
                    "payment_mode = :payment_mode, #version = :version"
                ),
                ConditionExpression=Attr("PK").exists()
                & Attr("version").eq(expected_version),
                ExpressionAttributeNames={"#payment": "payment", "#version": "version"},
                ExpressionAttributeValues={
                    ":payment": self._payment_to_item(reservation.payment),
                    ":paid_amount": str(reservation.paid_amount.amount),
                    ":payment_mode": reservation.payment_mode.value,
                    ":version": reservation.version,
                },
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise OptimisticLockException(
                    f"Reservation version conflict: "
                    f"expected {expected_version}, "
                    f"confirmation_number={reservation.id}"
                ) from e
            raise

    def _to_item(self, reservation: Reservation) -> dict:
        guest = reservation.guest
        stay = reservation.stay_period
        return {
            "PK": _pk(reservation.id),
            "SK": "RESERVATION",
            "entity_type": "RESERVATION",
            "confirmation_number": str(reservation.id),
            "hotel_id": reservation.hotel_id,
            "guest_name": guest.name,
            "guest_name_key": guest.name_key,
            "guest_email": guest.email,
            "guest_phone": guest.phone,
            "guest_nationality": guest.nationality,
            "guest_nationality_key": guest.nationality_key,
            "reserved_by": guest.reserved_by,
            "check_in_date": stay.check_in.isoformat(),
            "check_out_date": stay.check_out.isoformat(),
            "rooms": [
                {
                    "room_type": line.room_type,
                    "display_name": line.display_name,
                    "count": line.count,
                }
                for line in reservation.rooms.lines
            ],
            "room_signature": reservation.rooms.signature(),
            "total_amount": str(reservation.total_amount.amount),
            "paid_amount": str(reservation.paid_amount.amount),
            "commission": str(reservation.commission.amount),
            "currency": str(reservation.total_amount.currency),
            "payment_mode": reservation.payment_mode.value,
            "payment": self._payment_to_item(reservation.payment),
            "created_at": reservation.created_at.isoformat(),
            "version": reservation.version,
            "GSI1PK": _stay_key(reservation.hotel_id, stay.check_in, stay.check_out),
            "GSI1SK": f"RESERVATION#{reservation.id}",
        }

    @staticmethod
    def _payment_to_item(payment: PaymentDetails) -> dict:
        last_charged = payment.last_charged_amount
        lease = payment.capture_lease_expires_at
        return {
            "card_number": payment.card.number,
            "card_expiry": payment.card.expiry,
            "card_cvv": payment.card.cvv,
            "card_holder_name": payment.card.holder_name,
            "transaction_id": payment.transaction_id,
            "captured": payment.captured,
            "capturing": payment.capturing,
            "capture_lease_expires_at": lease.isoformat() if lease else None,
            "charge_count": payment.charge_count,
            "final_capture_transaction_id": payment.final_capture_transaction_id,
            "last_charged_amount": str(last_charged.amount) if last_charged else None,
            "last_charged_currency": str(last_charged.currency) if last_charged else None,
        }

    def _to_entity(self, item: dict) -> Reservation:
        """DynamoDB アイテムをドメインエンティティに変換する"""
        currency = Currency(item["currency"])
        return Reservation(
            id=ConfirmationNumber(value=item["confirmation_number"]),
            hotel_id=item["hotel_id"],
            guest=GuestIdentity(
                name=item["guest_name"],
                email=item.get("guest_email", ""),
                phone=item["guest_phone"],
                nationality=item.get("guest_nationality", ""),
                reserved_by=item.get("reserved_by", ""),
            ),
            stay_period=StayPeriod.from_strings(
                item["check_in_date"], item["check_out_date"]
            ),
            rooms=RoomSelection(
                lines=tuple(
                    RoomLine(
                        room_type=room["room_type"],
                        display_name=room.get("display_name", ""),
                        count=int(room["count"]),
                    )
                    for room in item["rooms"]
                )
            ),
            total_amount=Money(Decimal(item["total_amount"]), currency),
            paid_amount=Money(Decimal(item["paid_amount"]), currency),
            commission=Money(Decimal(item.get("commission", "0")), currency),
            payment_mode=PaymentMode(item["payment_mode"]),
            payment=self._payment_to_entity(item.get("payment") or {}),
            created_at=datetime.fromisoformat(item["created_at"]),
            version=int(item["version"]),
        )

    @staticmethod
    def _payment_to_entity(payment: dict) -> PaymentDetails:
        lease = payment.get("capture_lease_expires_at")
        last_charged = payment.get("last_charged_amount")
        return PaymentDetails(
            card=EncryptedCard(
                number=payment.get("card_number", ""),
                expiry=payment.get("card_expiry", ""),
                cvv=payment.get("card_cvv", ""),
                holder_name=payment.get("card_holder_name", ""),
            ),
            transaction_id=payment.get("transaction_id"),
            captured=bool(payment.get("captured", False)),
            capturing=bool(payment.get("capturing", False)),
            capture_lease_expires_at=datetime.fromisoformat(lease) if lease else None,
            charge_count=int(payment.get("charge_count", 0)),
            final_capture_transaction_id=payment.get("final_capture_transaction_id"),
            last_charged_amount=(
                Money(Decimal(last_charged), Currency(payment["last_charged_currency"]))
                if last_charged
                else None
            ),
        )
