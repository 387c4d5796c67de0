#!/usr/bin/env python3
"""
spheretrace - A Python Monte-Carlo Ray Tracer for Spheres

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from spheretrace.vec3 import Point3
from spheretrace.camera import Camera
from spheretrace.shapes import Sphere, HittableList
from spheretrace.materials import ScatterPolicy
from spheretrace.renderer import Renderer, RenderSettings
from spheretrace.output import write_ppm
from spheretrace.scene_parser import SceneParseError, load_scene


def create_default_scene() -> HittableList:
    """Create the two-sphere scene: a small sphere resting on a huge one."""
    world = HittableList()
    world.add(Sphere(Point3(0, 0, -1), 0.5))
    world.add(Sphere(Point3(0, -100.5, -1), 100))
    return world


def log(message: str = '', **kwargs) -> None:
    """Status output goes to stderr so stdout can carry the image."""
    print(message, file=sys.stderr, **kwargs)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='spheretrace - A Python Monte-Carlo Ray Tracer for Spheres',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py > image.ppm
  python main.py --width 800 --samples 200 --output render.png
  python main.py --scene scenes/two_spheres.yaml --scatter hemisphere --seed 1
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=None,
                        help='Image height (default: width / aspect ratio)')
    parser.add_argument('--aspect-ratio', type=float, default=16.0 / 9.0,
                        help='Aspect ratio when --height is not given (default: 16/9)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--scatter', type=str, default=ScatterPolicy.LAMBERTIAN.value,
                        choices=[p.value for p in ScatterPolicy],
                        help='Diffuse scattering policy (default: lambertian)')
    parser.add_argument('--shadow-bias', type=float, default=1e-4,
                        help='Ignore hits closer than this (default: 1e-4)')
    parser.add_argument('--reflectance', type=float, default=0.5,
                        help='Fraction of light kept per bounce (default: 0.5)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed (default: random)')
    parser.add_argument('--threads', type=int, default=1, help='Number of threads (0=auto)')
    parser.add_argument('--scene', type=str, default=None,
                        help='YAML/JSON scene file (overrides the options above)')
    parser.add_argument('--output', type=str, default='-',
                        help='Output filename, or - for PPM on stdout (default: -)')
    parser.add_argument('--quiet', action='store_true', help='No progress output')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr
    )

    try:
        if args.scene:
            world, camera, settings = load_scene(args.scene)
        else:
            if args.height is not None:
                height = args.height
            elif args.aspect_ratio > 0:
                height = int(args.width / args.aspect_ratio)
            else:
                raise ValueError(f"aspect ratio must be positive, got {args.aspect_ratio}")
            settings = RenderSettings(
                width=args.width,
                height=height,
                samples_per_pixel=args.samples,
                max_depth=args.depth,
                scatter_policy=args.scatter,
                shadow_bias=args.shadow_bias,
                reflectance=args.reflectance,
                seed=args.seed,
                num_threads=args.threads
            )
            world = create_default_scene()
            camera = Camera(aspect_ratio=settings.aspect_ratio)
    except (SceneParseError, ValueError) as e:
        log(f"Error: {e}")
        return 1

    if not args.quiet:
        log("=" * 60)
        log("spheretrace")
        log("=" * 60)
        log(f"  Resolution: {settings.width}x{settings.height}")
        log(f"  Samples: {settings.samples_per_pixel}")
        log(f"  Max Depth: {settings.max_depth}")
        log(f"  Scattering: {settings.scatter_policy.value}")
        log(f"  Threads: {settings.num_threads}")
        log(f"  Objects in scene: {len(world)}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            log(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    if not args.quiet:
        renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    sums = renderer.render(world, camera)
    elapsed = time.time() - start_time

    if not args.quiet:
        log(f"\nRender completed in {elapsed:.2f} seconds")

    if args.output == '-':
        write_ppm(sys.stdout, sums, settings.samples_per_pixel)
        sys.stdout.flush()
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        renderer.save_image(sums, str(output_path))
        if not args.quiet:
            log(f"Saved to: {output_path}")

    if not args.quiet:
        log("Done.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
