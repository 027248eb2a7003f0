"""
Whitted - A Python Recursive Ray Tracer

A classic Whitted-style ray tracer for scenes of spheres:
- Phong local shading from a fixed directional light
- Mirror reflection and Snell refraction with Schlick-Fresnel weighting
- Total internal reflection handling
- Multi-threaded tile rendering with PNG output
- YAML/JSON scene files
"""

__version__ = "0.1.0"
__author__ = "Whitted Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .materials import Material, PRESETS
from .shapes import Sphere, Intersection
from .scene import Scene, EPSILON, LIGHT_DIRECTION, local_color, shading_weights
from .camera import Camera, RaySetup
from .renderer import Renderer, RenderSettings
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
