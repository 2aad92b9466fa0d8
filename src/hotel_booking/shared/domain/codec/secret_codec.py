from abc import ABC, abstractmethod


class SecretCodec(ABC):
    """機密文字列（カード情報）の対称暗号化インターフェース

    - 保存時に暗号化し、利用する直前にのみ復号する
    - 空文字列は空文字列のまま扱う
    """

    @abstractmethod
    def encrypt(self, plaintext: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def decrypt(self, ciphertext: str) -> str:
        """復号する。失敗時は DecryptionFailedException"""
        raise NotImplementedError
