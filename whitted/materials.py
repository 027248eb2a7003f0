"""
Surface materials for Phong shading with Fresnel-weighted reflection and refraction.

A material splits incoming light into three shares:
- local: the Phong color (ambient + diffuse + specular)
- reflection: light arriving along the mirrored direction
- refraction: light transmitted through the surface (only when ior > 0)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

from .vec3 import Color


@dataclass(frozen=True)
class Material:
    """Immutable optical description of a surface.

    Attributes:
        ambient: Always-present base color
        diffuse: Color scaled by the light/normal orientation
        specular: Highlight color
        shininess: Specular exponent (higher = smaller, sharper highlight)
        local: Fraction of light taken from the local Phong color, in [0, 1]
        ior: Index of refraction, 0 disables refraction
    """
    ambient: Color
    diffuse: Color
    specular: Color
    shininess: float
    local: float = 1.0
    ior: float = 0.0

    def __post_init__(self):
        if not self.shininess > 0:
            raise ValueError(f"shininess must be positive, got {self.shininess}")
        if not 0.0 <= self.local <= 1.0:
            raise ValueError(f"local must lie in [0, 1], got {self.local}")
        if not self.ior >= 0.0:
            raise ValueError(f"ior must be non-negative, got {self.ior}")

    def reflects(self) -> bool:
        """Anything not fully lit locally has some reflective share."""
        return self.local < 1.0

    def refracts(self) -> bool:
        return self.local < 1.0 and self.ior > 0.0

    def reflectivity(self, cos_i: float) -> float:
        """Fraction of light reflected at the given incidence (Schlick).

        Without an index of refraction the base reflectivity is 1 - local.
        Otherwise it comes from the index ratio, inverted when the ray is
        entering the medium (cos_i < 0 against the outward normal).

        Args:
            cos_i: Dot product of the ray direction and the surface normal

        Returns:
            Reflectivity, not clamped
        """
        r0 = 1.0 - self.local
        sign = -1 if cos_i < 0 else 1

        if self.ior != 0.0:
            n = self.ior if sign == 1 else 1.0 / self.ior
            r0 = ((n - 1.0) / (n + 1.0)) ** 2

        return r0 + (1.0 - r0) * (1.0 - sign * cos_i) ** 5


PRESETS: Dict[str, Material] = {
    'black': Material(Color(0.1, 0.1, 0.1), Color(0.3, 0.3, 0.3), Color(1, 1, 1), 8, 0.3),
    'glass': Material(Color(0.3, 0.3, 0.3), Color(0.5, 0.5, 0.5), Color(1, 1, 1), 8, 0.2, 1.52),
    'mirror': Material(Color(1, 1, 1), Color(1, 1, 1), Color(1, 1, 1), 8, 0.1),
    'red': Material(Color(1, 0, 0), Color(1, 0, 0), Color(1, 1, 1), 8, 0.8),
    'cyan': Material(Color(0, 1, 1), Color(0, 1, 1), Color(1, 1, 1), 8, 0.8),
    'yellow': Material(Color(1, 1, 0), Color(1, 1, 0), Color(1, 1, 1), 8, 0.8),
    'green': Material(Color(0, 1, 0), Color(0, 1, 0), Color(1, 1, 1), 8, 0.8),
    'white': Material(Color(0.3, 0.3, 0.3), Color(0.5, 0.5, 0.5), Color(1, 1, 1), 8, 0.8),
}
