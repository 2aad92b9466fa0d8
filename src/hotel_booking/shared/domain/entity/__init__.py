from .aggregate import AggregateRoot, Entity

__all__ = ["AggregateRoot", "Entity"]
