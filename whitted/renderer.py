"""
Renderer module - drives the tracer over every pixel of an image.

Implements:
- One primary ray per pixel through Scene.trace_ray
- Multi-threaded tile-based rendering
- Clamped 8-bit output through Pillow
"""

from __future__ import annotations
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable, Tuple
import numpy as np

from .camera import Camera
from .scene import Scene, AIR_IOR

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 800
    height: int = 600
    max_depth: int = 9
    tile_size: int = 32
    num_threads: int = 0  # 0 = auto-detect

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Whitted-style renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            scene: The scene to render, left untouched while rendering
            camera: The camera to render from

        Returns:
            Unclamped image as numpy array of shape (height, width, 3)
        """
        width = self.settings.width
        height = self.settings.height
        max_depth = self.settings.max_depth

        setup = camera.ray_setup(width, height)
        image = np.zeros((height, width, 3), dtype=np.float64)

        tiles = self._generate_tiles(width, height)
        total_tiles = len(tiles)
        completed_tiles = [0]
        progress_lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d spheres, depth %d, %d tiles on %d threads",
            width, height, len(scene), max_depth, total_tiles, self.settings.num_threads
        )

        def render_tile(tile: Tuple[int, int, int, int]) -> Tuple[Tuple, np.ndarray]:
            x0, y0, x1, y1 = tile
            tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

            for j in range(y1 - y0):
                for i in range(x1 - x0):
                    ray = camera.get_ray(x0 + i, y0 + j, setup)
                    color = scene.trace_ray(ray, AIR_IOR, max_depth)
                    tile_image[j, i] = color.to_array()

            # Progress is counted and reported under one lock
            with progress_lock:
                completed_tiles[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_tiles[0] / total_tiles)

            return tile, tile_image

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles))
        else:
            results = [render_tile(tile) for tile in tiles]

        for tile, tile_image in results:
            x0, y0, x1, y1 = tile
            image[y0:y1, x0:x1] = tile_image

        return image

    def _generate_tiles(self, width: int, height: int) -> list[Tuple[int, int, int, int]]:
        """Split the image into (x0, y0, x1, y1) tiles."""
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    @staticmethod
    def to_ldr(image: np.ndarray) -> np.ndarray:
        """Clamp linear colors to [0, 1] and convert to 8-bit."""
        return (np.clip(image, 0.0, 1.0) * 255 + 0.5).astype(np.uint8)

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file, the extension picks the format.

        Args:
            image: Float image from render() or an 8-bit image
            filename: Output filename
        """
        from PIL import Image as PILImage

        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        PILImage.fromarray(image).save(filename)
        logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filename)
