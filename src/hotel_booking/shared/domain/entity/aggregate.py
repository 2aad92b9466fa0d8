from abc import ABC
from typing import Generic, TypeVar

ID = TypeVar("ID")


class Entity(ABC, Generic[ID]):
    """Entity 基底クラス（同一性は ID で判定する）"""

    def __init__(self, id: ID) -> None:
        self._id = id

    @property
    def id(self) -> ID:
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)


class AggregateRoot(Entity[ID]):
    """AggregateRoot 基底クラス

    - 配下の値へのアクセスは必ず集約ルートを経由
    - トランザクション境界 = 集約境界
    - version は楽観ロック用。状態を変える操作ごとに 1 つ進める
    """

    def __init__(self, id: ID, version: int = 0) -> None:
        super().__init__(id)
        self._version = version
        self._domain_events: list = []

    @property
    def version(self) -> int:
        return self._version

    def _increment_version(self) -> None:
        self._version += 1

    def add_domain_event(self, event: object) -> None:
        """ドメインイベントを追加する"""
        self._domain_events.append(event)

    def flush_domain_events(self) -> list:
        """ドメインイベントを取り出してクリアする"""
        events = self._domain_events.copy()
        self._domain_events.clear()
        return events
