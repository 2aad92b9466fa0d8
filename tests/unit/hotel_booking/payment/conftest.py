import pytest

from hotel_booking.payment.domain.value_object import ChargeContext


@pytest.fixture
def charge_context():
    return ChargeContext(
        invoice_number="1234567890",
        guest_name="Ahmed bin Ali",
        email="ahmed@example.com",
        nationality="SA",
        hotel_id="hotel-1",
        check_in="2025-06-01",
        check_out="2025-06-04",
        description="Reservation payment",
    )
