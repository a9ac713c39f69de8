"""Emissive material (area light).

An emissive surface terminates the path: the integrator returns the current
throughput times the emitted radiance and does not scatter further.
Radiance is unbounded above, so values greater than one make bright lights.
"""

from dataclasses import dataclass, field

from sdfpath.materials.base import MaterialType, validate_color


@dataclass(frozen=True)
class Emissive:
    """Light-emitting surface.

    Attributes:
        radiance: Emitted radiance (RGB, each component >= 0).

    Raises:
        ValueError: If any radiance component is negative.
    """

    radiance: tuple[float, float, float]
    kind: MaterialType = field(default=MaterialType.EMISSIVE, init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "radiance", validate_color("radiance", self.radiance))

    @property
    def color(self) -> tuple[float, float, float]:
        """Color carried into kernels (the radiance)."""
        return self.radiance
