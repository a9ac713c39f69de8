"""Material kinds and shared host-side validation.

Materials form a closed set. In kernels a material travels as the pair
``(kind, color)`` where ``kind`` is a MaterialType value and ``color`` is the
albedo for Lambertian surfaces or the emitted radiance for emissive ones.
Adding a new kind means extending the integrator's case analysis.
"""

from enum import IntEnum


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path integrator.
    """

    LAMBERTIAN = 0
    EMISSIVE = 1


def validate_color(
    name: str,
    color: tuple[float, float, float],
    upper: float | None = None,
) -> tuple[float, float, float]:
    """Check an RGB triple and return it as a tuple of floats.

    Args:
        name: Parameter name used in error messages.
        color: The (R, G, B) values.
        upper: Optional inclusive upper bound for every component.

    Returns:
        The color as a tuple of three floats.

    Raises:
        ValueError: If the color does not have three components, or a
            component is negative or above ``upper``.
    """
    values = tuple(float(c) for c in color)
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    for i, component in enumerate(values):
        if not component >= 0.0:
            raise ValueError(f"{name} component {i} = {component} must be non-negative")
        if upper is not None and component > upper:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, {upper:g}]. "
                "This would violate energy conservation."
            )
    return values


def material_from_record(kind: int, color: tuple[float, float, float]):
    """Rebuild a host-side material from its kernel representation.

    Args:
        kind: A MaterialType value.
        color: The albedo or radiance.

    Returns:
        A Lambertian or Emissive instance.

    Raises:
        ValueError: If ``kind`` is not a known MaterialType.
    """
    from sdfpath.materials.emissive import Emissive
    from sdfpath.materials.lambertian import Lambertian

    material_type = MaterialType(int(kind))
    if material_type == MaterialType.LAMBERTIAN:
        return Lambertian(color)
    return Emissive(color)
