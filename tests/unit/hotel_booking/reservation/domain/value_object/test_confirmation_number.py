import pytest

from hotel_booking.reservation.domain.value_object import ConfirmationNumber


class TestConfirmationNumber:
    def test_valid_confirmation_number(self):
        assert str(ConfirmationNumber(value=" 1234567890 ")) == "1234567890"

    @pytest.mark.parametrize("value", ["123456789", "12345678901", "0123456789", "12345abcde", ""])
    def test_invalid_confirmation_number_raises_error(self, value):
        with pytest.raises(ValueError, match="Invalid confirmation number"):
            ConfirmationNumber(value=value)

    def test_generate_bounds(self):
        assert str(ConfirmationNumber.generate(randbelow=lambda n: 0)) == "1000000000"
        assert (
            str(ConfirmationNumber.generate(randbelow=lambda n: n - 1)) == "9999999999"
        )

    def test_generate_is_ten_digits(self):
        for _ in range(50):
            assert len(str(ConfirmationNumber.generate())) == 10
