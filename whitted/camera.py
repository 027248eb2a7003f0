"""
Camera module for generating primary rays.

A pinhole camera: one ray per pixel, from the eye point through the pixel's
corner on a virtual screen one unit in front of the eye.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional
from .vec3 import Vec3, Point3
from .ray import Ray


@dataclass
class RaySetup:
    """Per-image constants for primary ray generation."""
    top_left: Vec3
    origin: Point3
    step_x: Vec3
    step_y: Vec3


class Camera:
    """A pinhole camera looking from an eye point towards a target."""

    def __init__(
        self,
        eye: Optional[Point3] = None,
        look_at: Optional[Point3] = None,
        up: Optional[Vec3] = None,
        fov: float = 45.0
    ):
        """Create a camera.

        The vectors are copied, so later changes to the arguments do not
        move the camera.

        Args:
            eye: Camera position in world space (default (0, 1, -5))
            look_at: Point the camera is looking at (default origin)
            up: Up direction of the screen (default (0, 1, 0))
            fov: Vertical opening angle in degrees
        """
        self.eye = Vec3.from_array(eye.to_array()) if eye is not None else Point3(0, 1, -5)
        self.look_at = Vec3.from_array(look_at.to_array()) if look_at is not None else Point3(0, 0, 0)
        self.up = Vec3.from_array(up.to_array()) if up is not None else Vec3(0, 1, 0)
        self.fov = fov

    @property
    def view_dir(self) -> Vec3:
        return (self.look_at - self.eye).normalize()

    def ray_setup(self, width: int, height: int) -> RaySetup:
        """Precompute the screen geometry for an image of the given size."""
        forward = self.view_dir
        half_angle = math.tan(math.radians(self.fov) / 2.0)
        aspect_ratio = width / height

        right = -forward.cross(self.up)
        row = right * (2.0 * half_angle * aspect_ratio)
        column = self.up * (2.0 * half_angle)

        return RaySetup(
            top_left=forward - (row - column) * 0.5,
            origin=self.eye,
            step_x=row / width,
            step_y=column * -1.0 / height,
        )

    def get_ray(self, x: float, y: float, setup: RaySetup) -> Ray:
        """Generate the unit-direction ray through pixel (x, y)."""
        direction = (setup.top_left + setup.step_x * x + setup.step_y * y).normalize()
        return Ray(setup.origin, direction)

    def __repr__(self) -> str:
        return f"Camera(eye={self.eye}, look_at={self.look_at}, fov={self.fov})"
