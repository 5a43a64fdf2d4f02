"""
Key - identity of an entity within a kind.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Key:
    """
    Identifies one entity: a kind plus an integer id.

    A key without an id is partial. The store completes it on write by
    assigning a fresh id; after that the id never changes.

    Attributes:
        kind: Name of the collection the entity belongs to.
        id: Numeric identifier, or None for a partial key.
    """

    kind: str
    id: int | None = None

    def __post_init__(self) -> None:
        if not self.kind:
            raise ValueError("Key kind cannot be empty")
        if self.id is not None and self.id <= 0:
            raise ValueError(f"Key id must be positive, got {self.id}")

    @property
    def is_partial(self) -> bool:
        return self.id is None

    def completed(self, id: int) -> "Key":
        """Return a complete copy of this partial key."""
        if not self.is_partial:
            raise ValueError(f"Key {self} is already complete")
        return Key(kind=self.kind, id=id)
