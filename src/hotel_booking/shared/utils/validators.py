from decimal import Decimal, InvalidOperation

# リクエストで受け付ける金額の上限
MAX_AMOUNT = Decimal("999999999999.99")


def to_decimal(v: object) -> Decimal:
    """任意の値を Decimal に変換する

    Pydantic の field_validator (mode="before") から呼び出すことを想定。
    すでに Decimal の場合はそのまま返し、それ以外は str 経由で変換する。
    float は str 経由にすることで 0.1 が 0.1000000000000000055... にならない。
    """
    if isinstance(v, Decimal):
        return v
    try:
        return Decimal(str(v).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal value: {v!r}") from e
