"""
Scene container and the recursive Whitted shading function.

trace_ray is the single entry point used by the renderer. It is a pure
function of (ray, medium ior, remaining depth) over a read-only scene, so
primary rays can be traced from several workers at once.
"""

from __future__ import annotations
import logging
from typing import Iterator, List, Optional, Tuple

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import Sphere, Intersection
from .materials import Material

logger = logging.getLogger(__name__)

# Offset applied to bounce ray origins to avoid re-hitting the same surface
EPSILON = 1e-4

# Fixed directional stand-in for a light source
LIGHT_DIRECTION = Vec3(0.0, 1.0, 0.0)

AIR_IOR = 1.0


def local_color(material: Material, direction: Vec3, normal: Vec3) -> Color:
    """Phong color at a hit, lit from LIGHT_DIRECTION.

    The diffuse factor is not clamped: faces pointing away
    from the light darken the ambient term.
    """
    diffuse = material.diffuse * LIGHT_DIRECTION.dot(normal)

    val = max(LIGHT_DIRECTION.dot(direction.reflection(normal)), 0.0)
    specular = material.specular * (val ** material.shininess)

    color = material.ambient * 0.5 + diffuse + specular
    return color.clamp_(0.0, 1.0)


def shading_weights(material: Material, cos_i: float) -> Tuple[float, float, float]:
    """Split a hit into (local, reflection, refraction) weights summing to 1."""
    if material.refracts():
        l = material.local
        r = material.reflectivity(cos_i)
        t = 1.0 - r
        return l, r * (1.0 - l), t * (1.0 - l)
    if material.reflects():
        r = material.reflectivity(cos_i)
        return 1.0 - r, r, 0.0
    return 1.0, 0.0, 0.0


class Scene:
    """An unordered collection of spheres in front of a solid background."""

    def __init__(self, background: Optional[Color] = None, spheres: Optional[List[Sphere]] = None):
        self.background = background if background is not None else Color(0, 0, 0)
        self.spheres: List[Sphere] = list(spheres) if spheres is not None else []

    def add(self, sphere: Sphere) -> None:
        """Add a sphere to the scene."""
        self.spheres.append(sphere)
        logger.debug("Added %r (%d spheres)", sphere, len(self.spheres))

    def intersect(self, ray: Ray) -> Optional[Intersection]:
        """Find the closest intersection among all spheres.

        Equal distances keep the sphere that was added first.
        """
        closest: Optional[Intersection] = None

        for sphere in self.spheres:
            hit = sphere.intersect(ray)
            if hit is None:
                continue
            if closest is None or hit.t < closest.t:
                closest = hit

        return closest

    def trace_ray(self, ray: Ray, ior: float = AIR_IOR, depth: int = 9) -> Color:
        """Compute the color seen along a ray.

        Args:
            ray: The ray to trace
            ior: Index of refraction of the medium the ray travels through
            depth: Remaining number of recursive bounces

        Returns:
            Unclamped RGB color
        """
        if depth <= 0:
            return Color(0, 0, 0)

        hit = self.intersect(ray)
        if hit is None:
            return Color.from_array(self.background.to_array())

        material = hit.material
        normal = hit.normal
        direction = ray.direction
        hit_point = ray.at(hit.t - EPSILON)

        reflection = Color(0, 0, 0)
        if material.reflects():
            reflection_ray = Ray(hit_point + normal * EPSILON, direction.reflection(normal))
            reflection = self.trace_ray(reflection_ray, ior, depth - 1)

        refraction = Color(0, 0, 0)
        if material.refracts():
            refraction_dir = direction.refraction(normal, material.ior)
            if refraction_dir is not None:
                if ior == AIR_IOR:
                    # Entering the object
                    refraction_ray = Ray(hit_point - normal * EPSILON, refraction_dir)
                    refraction = self.trace_ray(refraction_ray, material.ior, depth - 1)
                else:
                    refraction_ray = Ray(hit_point + normal * EPSILON, refraction_dir)
                    refraction = self.trace_ray(refraction_ray, AIR_IOR, depth - 1)

        local = local_color(material, direction, normal)

        l, r, t = shading_weights(material, direction.dot(normal))

        return local * l + reflection * r + refraction * t

    def __len__(self) -> int:
        return len(self.spheres)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self.spheres)
