from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TypeVar

from aws_lambda_powertools import Logger

logger = Logger(child=True)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """回数上限つきの再試行ポリシー

    - max_attempts: 初回を含む最大試行回数
    - backoff_seconds: 2 回目以降の待機時間の初期値（指数的に増やす）
    """

    max_attempts: int
    backoff_seconds: float = 0.0
    sleep: Callable[[float], None] = field(
        default=time.sleep, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds cannot be negative")

    def attempts(self) -> Iterator[int]:
        """試行番号（1 始まり）を返し、2 回目以降は待機してから返す"""
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1 and self.backoff_seconds:
                self.sleep(self.backoff_seconds * 2 ** (attempt - 2))
            yield attempt

    def call(
        self,
        operation: Callable[[], T],
        retry_on: tuple[type[BaseException], ...],
    ) -> T:
        """retry_on の例外に限り再試行し、上限に達したら最後の例外を送出する"""
        for attempt in self.attempts():
            if attempt == self.max_attempts:
                # 最終試行の例外はそのまま呼び出し元へ
                return operation()
            try:
                return operation()
            except retry_on as e:
                logger.warning(
                    "Retryable error",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self.max_attempts,
                        "error": type(e).__name__,
                    },
                )
