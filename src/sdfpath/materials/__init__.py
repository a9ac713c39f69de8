"""Materials module.

Components:
    base: MaterialType enumeration and host-side validation
    lambertian: Ideal diffuse reflection with cosine-weighted scattering
    emissive: Area lights

The material set is closed. Each material is a frozen host-side dataclass
exposing ``kind`` and ``color``; kernels only ever see that pair.
"""

from .base import MaterialType, material_from_record, validate_color
from .emissive import Emissive
from .lambertian import Lambertian, scatter_lambertian

__all__ = [
    "MaterialType",
    "material_from_record",
    "validate_color",
    "Lambertian",
    "scatter_lambertian",
    "Emissive",
]
