#!/usr/bin/env python3
"""
Whitted - A Python Recursive Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from whitted.vec3 import Vec3, Color, Point3
from whitted.camera import Camera
from whitted.shapes import Sphere
from whitted.materials import PRESETS
from whitted.scene import Scene
from whitted.renderer import Renderer, RenderSettings
from whitted.scene_parser import SceneParseError, load_scene


def create_demo_scene() -> Scene:
    """Create the demo scene: five colored spheres, a glass ball and a mirror."""
    scene = Scene(Color(0.0, 0.0, 0.0))

    scene.add(Sphere(Point3(2, -1, 2.5), 0.5, PRESETS['white']))
    scene.add(Sphere(Point3(-5, -1, 6.2), 1.0, PRESETS['red']))
    scene.add(Sphere(Point3(7, -1, 8), 1.0, PRESETS['cyan']))
    scene.add(Sphere(Point3(-12.9, -1, 25.2), 1.0, PRESETS['yellow']))
    scene.add(Sphere(Point3(2.9, -1, 15.2), 1.0, PRESETS['green']))

    # Only glass refracts, everything else has ior 0
    scene.add(Sphere(Point3(-1, -1, 2.5), 2.0, PRESETS['glass']))
    scene.add(Sphere(Point3(5, -1, 10.5), 2.0, PRESETS['mirror']))

    return scene


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Whitted - A Python Recursive Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py --width 1280 --height 800 --depth 5 --output small.png
  python main.py --scene scenes/spheres.yaml --output spheres.png
        '''
    )

    parser.add_argument('--scene', type=str, default=None, help='Scene file (YAML or JSON, default: demo scene)')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: 800)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 600)')
    parser.add_argument('--depth', type=int, default=None, help='Max recursion depth (default: 9)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    print("=" * 60)
    print("Whitted Ray Tracer")
    print("=" * 60)

    if args.scene:
        print(f"\nLoading scene: {args.scene}")
        try:
            scene, camera, settings = load_scene(args.scene)
        except SceneParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        print("\nCreating scene: demo")
        scene = create_demo_scene()
        camera = Camera(eye=Point3(0, 1, -5), look_at=Point3(0, 0, 0), up=Vec3(0, 1, 0))
        settings = RenderSettings()

    # Command line overrides the scene file
    settings = RenderSettings(
        width=args.width if args.width is not None else settings.width,
        height=args.height if args.height is not None else settings.height,
        max_depth=args.depth if args.depth is not None else settings.max_depth,
        tile_size=settings.tile_size,
        num_threads=args.threads if args.threads is not None else settings.num_threads
    )

    print(f"  Spheres in scene: {len(scene)}")
    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(scene, camera)

    elapsed = time.time() - start_time
    print(f"\nelapsed time: {elapsed:.2f}s")
    print(f"  Primary rays per second: {(settings.width * settings.height) / max(elapsed, 1e-9):.0f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, str(output_path))

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
