"""Resource points and extraction."""

import math
from dataclasses import dataclass

import structlog

from .terrain_types import ResourceType

logger = structlog.get_logger()

# Set once at placement
_FIXED_FIELDS = frozenset({"x", "y", "resource_type", "quality"})


@dataclass
class ResourcePoint:
    """A harvestable resource node.

    Position, type and quality are fixed at placement. Amount only goes down,
    through extract(); a point is never removed, only marked exhausted.
    """

    x: float
    y: float
    resource_type: ResourceType
    amount: int
    quality: float = 1.0
    exhausted: bool = False

    def __post_init__(self) -> None:
        if self.amount <= 0:
            self.amount = 0
            self.exhausted = True

    def __setattr__(self, name: str, value: object) -> None:
        if name in _FIXED_FIELDS and name in self.__dict__:
            raise AttributeError(f"ResourcePoint.{name} cannot be changed after placement")
        super().__setattr__(name, value)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "ResourcePoint") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def extract(self, requested: int) -> int:
        """Take up to `requested` units from this point.

        Args:
            requested: Amount asked for.

        Returns:
            Amount actually granted, capped at what remains.
        """
        if self.exhausted or requested <= 0:
            return 0

        granted = min(requested, self.amount)
        self.amount -= granted

        logger.debug(
            "resource_extracted",
            resource_type=self.resource_type.value,
            x=self.x,
            y=self.y,
            granted=granted,
            remaining=self.amount,
        )

        if self.amount <= 0:
            self.exhausted = True
            logger.info(
                "resource_exhausted",
                resource_type=self.resource_type.value,
                x=self.x,
                y=self.y,
            )

        return granted
