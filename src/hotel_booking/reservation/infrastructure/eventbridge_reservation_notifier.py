import json
import os
from dataclasses import asdict

import boto3
from aws_lambda_powertools import Logger

from hotel_booking.reservation.domain.entity import Reservation
from hotel_booking.reservation.domain.notifier import ReservationNotifier

logger = Logger(child=True)

EVENT_SOURCE = "hotel-booking.reservation"


def reservation_summary(reservation: Reservation) -> dict:
    """通知用の予約概要（カード情報は含めない）"""
    return {
        "confirmation_number": str(reservation.id),
        "hotel_id": reservation.hotel_id,
        "guest": {
            "name": reservation.guest.name,
            "email": reservation.guest.email,
            "phone": reservation.guest.phone,
            "nationality": reservation.guest.nationality,
        },
        "check_in_date": reservation.stay_period.check_in.isoformat(),
        "check_out_date": reservation.stay_period.check_out.isoformat(),
        "nights": reservation.stay_period.nights(),
        "rooms": [
            {
                "room_type": line.room_type,
                "display_name": line.display_name,
                "count": line.count,
            }
            for line in reservation.rooms.lines
        ],
        "total_amount": str(reservation.total_amount.amount),
        "paid_amount": str(reservation.paid_amount.amount),
        "currency": str(reservation.total_amount.currency),
        "payment_mode": reservation.payment_mode.value,
    }


class EventBridgeReservationNotifier(ReservationNotifier):
    """EventBridge にドメインイベントを送る ReservationNotifier

    メール・PDF・WhatsApp の送信はイベントを購読する側が担う。
    """

    def __init__(self, event_bus_name: str | None = None, client=None) -> None:
        self.event_bus_name = event_bus_name or os.getenv("EVENT_BUS_NAME", "default")
        self.client = client if client is not None else boto3.client("events")

    def publish(self, reservation: Reservation, events: list) -> None:
        if not events:
            return
        summary = reservation_summary(reservation)
        entries = [
            {
                "Source": EVENT_SOURCE,
                "DetailType": type(event).__name__,
                "Detail": json.dumps(
                    {"event": asdict(event), "reservation": summary}, default=str
                ),
                "EventBusName": self.event_bus_name,
            }
            for event in events
        ]
        response = self.client.put_events(Entries=entries)
        if response.get("FailedEntryCount"):
            logger.error(
                "Some reservation events were not delivered",
                extra={
                    "confirmation_number": str(reservation.id),
                    "failed_entry_count": response["FailedEntryCount"],
                },
            )
