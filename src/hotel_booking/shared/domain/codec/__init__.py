from .secret_codec import SecretCodec

__all__ = ["SecretCodec"]
