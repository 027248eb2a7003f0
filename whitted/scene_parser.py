"""
Scene description parser.

Reads YAML or JSON scene files with:
- Background color
- Materials library (presets or explicit Phong/Fresnel parameters)
- Spheres
- Camera
- Render settings

Example scene file:
```yaml
background: [0, 0, 0]

camera:
  eye: [0, 1, -5]
  look_at: [0, 0, 0]
  fov: 45

render:
  width: 640
  height: 400
  max_depth: 9

materials:
  glass:
    preset: glass
  chrome:
    ambient: [0.2, 0.2, 0.2]
    diffuse: [0.4, 0.4, 0.4]
    specular: [1, 1, 1]
    shininess: 32
    local: 0.1

spheres:
  - center: [-1, -1, 2.5]
    radius: 2
    material: glass
  - center: [5, -1, 10.5]
    radius: 2
    material: chrome
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere
from .materials import Material, PRESETS
from .scene import Scene
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = dict(PRESETS)
        self.scene: Scene = Scene()
        self.camera: Camera = Camera()
        self.settings: RenderSettings = RenderSettings()

    def parse_file(self, filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        self._expect(data, dict, "scene")

        try:
            if 'background' in data:
                self.scene.background = self._parse_color(data['background'])

            # Materials first, spheres reference them
            if 'materials' in data:
                self._parse_materials(data['materials'])

            if 'spheres' in data:
                self._parse_spheres(data['spheres'])

            if 'camera' in data:
                self._parse_camera(data['camera'])

            if 'render' in data:
                self._parse_settings(data['render'])
        except (ValueError, TypeError, AttributeError) as e:
            raise SceneParseError(str(e)) from e

        logger.info("Parsed scene with %d spheres and %d materials", len(self.scene), len(self.materials))
        return self.scene, self.camera, self.settings

    @staticmethod
    def _expect(data: Any, kind: type, what: str) -> None:
        """Raise SceneParseError unless data is of the expected container type."""
        if not isinstance(data, kind):
            expected = 'a mapping' if kind is dict else 'a list'
            raise SceneParseError(f"{what} must be {expected}, got: {data!r}")

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            hex_color = data[1:] if data.startswith('#') else ''
            if len(hex_color) != 6:
                raise SceneParseError(f"Cannot parse color from string: {data}")
            r = int(hex_color[0:2], 16) / 255.0
            g = int(hex_color[2:4], 16) / 255.0
            b = int(hex_color[4:6], 16) / 255.0
            return Color(r, g, b)
        return self._parse_vec3(data)

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        self._expect(mat_data, dict, "Material definition")
        if 'preset' in mat_data:
            preset = mat_data['preset']
            if preset not in PRESETS:
                raise SceneParseError(f"Unknown material preset: {preset}")
            return PRESETS[preset]

        return Material(
            ambient=self._parse_color(mat_data.get('ambient', [0.1, 0.1, 0.1])),
            diffuse=self._parse_color(mat_data.get('diffuse', [0.5, 0.5, 0.5])),
            specular=self._parse_color(mat_data.get('specular', [1, 1, 1])),
            shininess=float(mat_data.get('shininess', 8)),
            local=float(mat_data.get('local', 1.0)),
            ior=float(mat_data.get('ior', 0.0)),
        )

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        self._expect(materials_data, dict, "materials section")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_spheres(self, spheres_data: list) -> None:
        """Parse spheres section."""
        self._expect(spheres_data, list, "spheres section")
        for sphere_data in spheres_data:
            self._expect(sphere_data, dict, "Sphere")
            material = self._get_material(sphere_data.get('material', 'white'))
            center = self._parse_vec3(sphere_data.get('center', [0, 0, 0]))
            radius = float(sphere_data.get('radius', 1.0))
            self.scene.add(Sphere(center, radius, material))

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        self._expect(camera_data, dict, "camera section")
        self.camera = Camera(
            eye=self._parse_vec3(camera_data.get('eye', [0, 1, -5])),
            look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, 0])),
            up=self._parse_vec3(camera_data.get('up', [0, 1, 0])),
            fov=float(camera_data.get('fov', 45))
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        self._expect(settings_data, dict, "render section")
        self.settings = RenderSettings(
            width=int(settings_data.get('width', 800)),
            height=int(settings_data.get('height', 600)),
            max_depth=int(settings_data.get('max_depth', 9)),
            tile_size=int(settings_data.get('tile_size', 32)),
            num_threads=int(settings_data.get('threads', 0))
        )


def load_scene(filepath: str) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)
