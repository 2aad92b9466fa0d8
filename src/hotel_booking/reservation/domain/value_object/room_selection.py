from __future__ import annotations

from collections import Counter
from dataclasses import dataclass


def _key_part(text: str) -> str:
    return " ".join((text or "").split()).lower()


@dataclass(frozen=True)
class RoomLine:
    """予約する部屋タイプと室数"""

    room_type: str
    display_name: str
    count: int

    def __post_init__(self) -> None:
        if not (self.room_type or "").strip():
            raise ValueError("Room type cannot be empty")
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ValueError("Room count must be an integer")
        if self.count < 1:
            raise ValueError("Room count must be at least 1")


@dataclass(frozen=True)
class RoomSelection:
    """部屋の選択内容（並び順は同一性に影響しない）"""

    lines: tuple[RoomLine, ...]

    def __post_init__(self) -> None:
        lines = tuple(self.lines)
        if not lines:
            raise ValueError("At least one room must be selected")
        object.__setattr__(self, "lines", lines)

    @classmethod
    def of(cls, rooms: list[dict]) -> RoomSelection:
        return cls(
            lines=tuple(
                RoomLine(
                    room_type=room["room_type"],
                    display_name=room.get("display_name", ""),
                    count=room["count"],
                )
                for room in rooms
            )
        )

    def total_rooms(self) -> int:
        return sum(line.count for line in self.lines)

    def signature(self) -> str:
        """(部屋タイプ, 表示名) ごとに室数を合算し、キー順に連結した比較用文字列"""
        totals: Counter[tuple[str, str]] = Counter()
        for line in self.lines:
            totals[(_key_part(line.room_type), _key_part(line.display_name))] += line.count
        return ";".join(
            f"{room_type}|{display_name}|{totals[(room_type, display_name)]}"
            for room_type, display_name in sorted(totals)
        )
