import json
from unittest.mock import MagicMock

from hotel_booking.reservation.domain.event import ReservationCreated
from hotel_booking.reservation.infrastructure.eventbridge_reservation_notifier import (
    EVENT_SOURCE,
    EventBridgeReservationNotifier,
)
from hotel_booking.shared.domain import Money


class TestEventBridgeReservationNotifier:
    def test_publish_sends_one_entry_per_event(self, create_reservation):
        client = MagicMock()
        client.put_events.return_value = {"FailedEntryCount": 0, "Entries": []}
        reservation = create_reservation()
        reservation.record_capture(
            "capture-1", Money.of("150", "SAR"), Money.of("150", "SAR"), False
        )
        events = reservation.flush_domain_events()

        EventBridgeReservationNotifier(event_bus_name="bus", client=client).publish(
            reservation, events
        )

        [entry] = client.put_events.call_args.kwargs["Entries"]
        assert entry["Source"] == EVENT_SOURCE
        assert entry["DetailType"] == "PaymentCaptured"
        assert entry["EventBusName"] == "bus"
        detail = json.loads(entry["Detail"])
        assert detail["event"]["transaction_id"] == "capture-1"
        assert detail["reservation"]["confirmation_number"] == "1234567890"
        assert detail["reservation"]["paid_amount"] == "150.00"

    def test_payload_never_contains_card_data(self, create_reservation):
        client = MagicMock()
        client.put_events.return_value = {"FailedEntryCount": 0}
        reservation = create_reservation()

        EventBridgeReservationNotifier(event_bus_name="bus", client=client).publish(
            reservation,
            [ReservationCreated("1234567890", reservation.created_at)],
        )

        detail = client.put_events.call_args.kwargs["Entries"][0]["Detail"]
        assert "4111" not in detail
        assert reservation.payment.card.number not in detail
        assert "card" not in json.loads(detail)["reservation"]

    def test_no_events_skips_call(self, create_reservation):
        client = MagicMock()

        EventBridgeReservationNotifier(event_bus_name="bus", client=client).publish(
            create_reservation(), []
        )

        client.put_events.assert_not_called()

    def test_failed_entries_are_logged_not_raised(self, create_reservation):
        client = MagicMock()
        client.put_events.return_value = {"FailedEntryCount": 1}
        reservation = create_reservation()

        EventBridgeReservationNotifier(event_bus_name="bus", client=client).publish(
            reservation, [ReservationCreated("1234567890", reservation.created_at)]
        )

        client.put_events.assert_called_once()
