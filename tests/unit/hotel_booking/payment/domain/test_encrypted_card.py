from unittest.mock import MagicMock

import pytest

from hotel_booking.payment.domain.value_object import EncryptedCard
from hotel_booking.shared.domain.exception import DecryptionFailedException


class TestEncryptedCard:
    def test_encrypt_never_keeps_plaintext(self, card, codec):
        encrypted = EncryptedCard.encrypt(card, codec)
        assert card.number not in (encrypted.number, encrypted.expiry, encrypted.cvv)
        assert not encrypted.is_empty()

    def test_decrypt_restores_card(self, card, codec):
        assert EncryptedCard.encrypt(card, codec).decrypt(codec) == card

    def test_empty(self):
        assert EncryptedCard.empty().is_empty()

    def test_incomplete_card_raises(self, codec):
        with pytest.raises(DecryptionFailedException, match="incomplete"):
            EncryptedCard(number="abc", expiry="", cvv="").decrypt(codec)

    def test_invalid_plaintext_raises(self):
        codec = MagicMock()
        codec.decrypt.return_value = "garbage"

        with pytest.raises(DecryptionFailedException, match="missing or invalid"):
            EncryptedCard(number="a", expiry="b", cvv="c").decrypt(codec)
