import base64
import hashlib
import os

from cryptography.fernet import Fernet, InvalidToken

from hotel_booking.shared.domain.codec import SecretCodec
from hotel_booking.shared.domain.exception import DecryptionFailedException


def derive_fernet_key(key: str | bytes) -> bytes:
    """任意の文字列から Fernet 用の鍵（32 バイト URL-safe base64）を得る

    既に Fernet 形式の鍵（bytes）であればそのまま使う。
    """
    if isinstance(key, bytes):
        return key
    return base64.urlsafe_b64encode(hashlib.sha256(key.encode()).digest())


class FernetSecretCodec(SecretCodec):
    """Fernet（AES-128-CBC + HMAC）による SecretCodec の具象実装"""

    def __init__(self, key: str | bytes | None = None) -> None:
        key = key or os.getenv("CARD_ENCRYPTION_KEY")
        if not key:
            raise ValueError(
                "CARD_ENCRYPTION_KEY is not configured. "
                "Generate one with: python -c 'from cryptography.fernet import Fernet; "
                "print(Fernet.generate_key().decode())'"
            )
        self._fernet = Fernet(derive_fernet_key(key))

    def encrypt(self, plaintext: str) -> str:
        if not plaintext:
            return ""
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        if not ciphertext:
            return ""
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, UnicodeDecodeError) as e:
            raise DecryptionFailedException("Stored secret could not be decrypted") from e
