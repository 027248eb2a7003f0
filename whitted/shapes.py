"""
Sphere primitive and the intersection record it produces.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class Intersection:
    """Stores information about a ray-sphere hit.

    Attributes:
        material: The material of the sphere that was hit
        normal: Unit surface normal, pointing away from the sphere center
        t: Ray parameter of the hit, never negative
    """
    material: Material
    normal: Vec3
    t: float


class Sphere:
    """A sphere defined by center, radius and material."""

    def __init__(self, center: Point3, radius: float, material: Material):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere, must be positive
            material: Material for shading
        """
        if not radius > 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = radius
        self.material = material

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        """Find the nearest forward hit of the ray on this sphere.

        Projects the center onto the ray and uses the perpendicular distance
        to get the half chord. When the ray starts inside the sphere the near
        root is negative and the far root is used instead.
        """
        dist = self.center - ray.origin
        projection = dist.dot(ray.direction)

        # Sphere is behind the ray
        if projection < 0:
            return None

        perp2 = dist.length_squared() - projection * projection
        radius2 = self.radius * self.radius
        if perp2 > radius2:
            return None

        half_chord = math.sqrt(radius2 - perp2)
        t = projection - half_chord
        if t < 0:
            t = projection + half_chord

        point = ray.at(t)
        normal = (point - self.center).normalize()

        return Intersection(material=self.material, normal=normal, t=t)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"
