"""Base entity class."""

from dataclasses import dataclass


@dataclass
class Entity:
    """An axis-aligned rectangle on the play-field.

    ``y`` grows downwards: entities spawn above the top edge (negative y)
    and scroll towards the vehicle at the bottom.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def colliderect(self, other: "Entity") -> bool:
        """Check if this rect overlaps another rect (touching edges do not count)."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )
