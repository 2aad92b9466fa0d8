from datetime import date

import pytest

from hotel_booking.reservation.domain.value_object import StayPeriod


class TestStayPeriod:
    def test_valid_stay_period(self):
        stay_period = StayPeriod.from_strings("2025-06-01", "2025-06-04")
        assert stay_period.check_in == date(2025, 6, 1)
        assert stay_period.check_out == date(2025, 6, 4)

    def test_nights_calculation(self):
        assert StayPeriod.from_strings("2025-06-01", "2025-06-04").nights() == 3

    def test_checkout_before_checkin_raises_error(self):
        with pytest.raises(
            ValueError, match="Check-out date must be after check-in date"
        ):
            StayPeriod.from_strings("2025-06-04", "2025-06-01")

    def test_same_date_raises_error(self):
        with pytest.raises(
            ValueError, match="Check-out date must be after check-in date"
        ):
            StayPeriod(check_in=date(2025, 6, 1), check_out=date(2025, 6, 1))

    def test_invalid_date_format_raises_error(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            StayPeriod.from_strings("not-a-date", "2025-06-04")
