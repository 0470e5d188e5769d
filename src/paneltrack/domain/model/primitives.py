"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass

type SerialNumber = str
type Measurement = float


@dataclass(frozen=True)
class Dimensions:
    width: Measurement = 0.0
    height: Measurement = 0.0
    thickness: Measurement = 0.0

    def __post_init__(self) -> None:
        for name, value in (
            ("width", self.width),
            ("height", self.height),
            ("thickness", self.thickness),
        ):
            if value < 0:
                raise ValueError(f"Panel {name} must be non-negative, got {value}")

    def __composite_values__(self) -> tuple[float, float, float]:
        """For SQLAlchemy composite columns (adapter-side convenience)."""
        return (self.width, self.height, self.thickness)
