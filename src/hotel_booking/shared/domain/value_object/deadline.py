from __future__ import annotations

import math
import time
from dataclasses import dataclass

from hotel_booking.shared.domain.exception import DeadlineExceededException


@dataclass(frozen=True)
class Deadline:
    """呼び出し元が指定する処理期限（time.monotonic 基準）

    外部呼び出しの直前に残り時間を確認し、ゲートウェイへの
    HTTP タイムアウトも残り時間を超えないように切り詰める。
    """

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """現在から seconds 秒後を期限とする"""
        return cls(expires_at=time.monotonic() + seconds)

    @classmethod
    def unbounded(cls) -> Deadline:
        """期限なし"""
        return cls(expires_at=math.inf)

    @classmethod
    def from_lambda_context(
        cls, context: object, safety_margin_seconds: float = 1.0
    ) -> Deadline:
        """Lambda の残り実行時間から期限を作る"""
        remaining_ms = context.get_remaining_time_in_millis()  # type: ignore[attr-defined]
        return cls.after(max(0.0, remaining_ms / 1000 - safety_margin_seconds))

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    def is_expired(self) -> bool:
        return self.remaining() <= 0

    def ensure_not_expired(self, step: str) -> None:
        if self.is_expired():
            raise DeadlineExceededException(f"Deadline exceeded before {step}")

    def timeout_for(self, limit_seconds: float) -> float:
        """外部呼び出しに使うタイムアウト秒数（期限切れなら例外）"""
        self.ensure_not_expired("external call")
        return min(limit_seconds, self.remaining())
