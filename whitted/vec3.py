"""
Vector3 class for 3D math operations.

Used throughout the tracer for:
- Points in 3D space
- Direction vectors
- RGB color values
"""

from __future__ import annotations
import math
from typing import Optional, Union
import numpy as np


class Vec3:
    """A 3D vector class supporting common vector operations.

    Uses numpy internally for storage while providing a clean, Pythonic API.
    Operators return new vectors, except the in-place compound operators.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create Vec3 from numpy array."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color channels
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return np.allclose(self._data, other._data)

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return Vec3.from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data / other._data)
        return Vec3.from_array(self._data / other)

    def __iadd__(self, other: Union[Vec3, float]) -> Vec3:
        self._data += other._data if isinstance(other, Vec3) else other
        return self

    def __isub__(self, other: Union[Vec3, float]) -> Vec3:
        self._data -= other._data if isinstance(other, Vec3) else other
        return self

    def __imul__(self, other: Union[Vec3, float]) -> Vec3:
        self._data *= other._data if isinstance(other, Vec3) else other
        return self

    def __itruediv__(self, other: float) -> Vec3:
        self._data *= 1.0 / other
        return self

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __setitem__(self, index: int, value: float):
        self._data[index] = value

    def __iter__(self):
        return (float(c) for c in self._data)

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction.

        The zero vector is not special-cased: its components come back NaN.
        """
        return self / self.length()

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def reflection(self, normal: Vec3) -> Vec3:
        """Reflect this direction about the given normal: I - 2(I.N)N.

        Works for either normal orientation.
        """
        return self - normal * (2.0 * self.dot(normal))

    def refraction(self, normal: Vec3, ior: float) -> Optional[Vec3]:
        """Refract this direction through a surface using Snell's law.

        The sign of I.N tells whether the ray enters the medium (negative,
        the ratio becomes 1/ior) or leaves it (positive, the ratio is ior).

        Args:
            normal: Outward surface normal
            ior: Index of refraction of the medium behind the surface

        Returns:
            The refracted direction, or None on total internal reflection
        """
        cos_i = self.dot(normal)
        sign = -1 if cos_i < 0 else 1
        n = ior if sign == 1 else 1.0 / ior
        sin_t2 = n * n * (1.0 - cos_i * cos_i)

        if sin_t2 > 1.0:
            return None

        return self * n - normal * (n * cos_i - sign * math.sqrt(1.0 - sin_t2))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components to the given range."""
        return Vec3.from_array(np.clip(self._data, min_val, max_val))

    def clamp_(self, min_val: float = 0.0, max_val: float = 1.0) -> Vec3:
        """Clamp all components in place and return self."""
        np.clip(self._data, min_val, max_val, out=self._data)
        return self


# Convenience type aliases
Point3 = Vec3
Color = Vec3
