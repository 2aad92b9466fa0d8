from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass


def to_ascii_digits(text: str) -> str:
    """アラビア数字・ペルシア数字などの数字グリフを ASCII の 0-9 に置き換える"""
    return "".join(str(unicodedata.decimal(ch, ch)) for ch in text)


def normalize_phone(phone: str) -> str:
    """数字以外を取り除いた電話番号（冪等）"""
    return re.sub(r"[^0-9]", "", to_ascii_digits(phone or ""))


def normalize_name(name: str) -> str:
    """空白を 1 つにまとめて小文字化した氏名キー"""
    return " ".join((name or "").split()).lower()


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@dataclass(frozen=True)
class GuestIdentity:
    """宿泊者の識別情報

    重複判定と表示にのみ使い、主キーには使わない。
    email / phone / reserved_by は正規化して保持する。
    nationality は入力どおり（前後の空白のみ除去）保持し、照合には nationality_key を使う。
    """

    name: str
    email: str
    phone: str
    nationality: str = ""
    reserved_by: str = ""

    def __post_init__(self) -> None:
        name = " ".join((self.name or "").split())
        if not name:
            raise ValueError("Guest name cannot be empty")
        email = normalize_email(self.email)
        if email and not re.fullmatch(r"[^@\s]+@[^@\s]+", email):
            raise ValueError(f"Invalid email address: {self.email}")
        phone = normalize_phone(self.phone)
        if not phone:
            raise ValueError("Guest phone must contain digits")

        object.__setattr__(self, "name", name)
        object.__setattr__(self, "email", email)
        object.__setattr__(self, "phone", phone)
        object.__setattr__(self, "nationality", (self.nationality or "").strip())
        object.__setattr__(self, "reserved_by", normalize_name(self.reserved_by))

    @property
    def name_key(self) -> str:
        return normalize_name(self.name)

    @property
    def nationality_key(self) -> str:
        return self.nationality.lower()
