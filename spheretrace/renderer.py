"""
Renderer module - the heart of the ray tracer.

Implements:
- Monte-Carlo path tracing of diffuse surfaces under a sky gradient
- Jittered supersampling per pixel
- Tile-based rendering, optionally on a thread pool
- Deterministic output for a fixed seed, whatever the thread count
"""

from __future__ import annotations
import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union
import numpy as np

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .materials import Diffuse, Material, ScatterPolicy
from .environment import Environment, GradientEnvironment
from .sampling import NumpyRandomSource, RandomSource
from . import output

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    scatter_policy: Union[ScatterPolicy, str] = ScatterPolicy.LAMBERTIAN
    shadow_bias: float = 1e-4  # t below this is treated as self-intersection
    reflectance: float = 0.5
    seed: Optional[int] = None
    tile_size: int = 32
    num_threads: int = 1  # 0 = auto-detect

    def __post_init__(self):
        for name in ('width', 'height', 'samples_per_pixel', 'max_depth', 'tile_size', 'num_threads'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.seed is not None:
            if isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0:
                raise ValueError(f"seed must be a non-negative integer, got {self.seed!r}")
        if self.width < 2 or self.height < 2:
            raise ValueError(f"Image must be at least 2x2, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.shadow_bias <= 0:
            raise ValueError(f"shadow_bias must be positive, got {self.shadow_bias}")
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must not be negative, got {self.num_threads}")
        self.scatter_policy = ScatterPolicy.parse(self.scatter_policy)
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def ray_color(
    ray: Ray,
    world: Hittable,
    depth: int,
    rng: RandomSource,
    material: Optional[Material] = None,
    environment: Optional[Environment] = None,
    shadow_bias: float = 1e-4
) -> Color:
    """Compute the color carried back along a ray.

    Equivalent to the recursive definition
        color(ray, d) = black                                if d <= 0
                      = attenuation * color(scattered, d-1)  on hit
                      = environment(ray.direction)           on miss
    but unrolled into a loop with a running attenuation, so stack use does
    not grow with depth.

    Args:
        ray: The ray to trace
        world: The scene to trace against
        depth: Bounce budget; an exhausted budget contributes black
        rng: Source of random samples for scattering
        material: Material applied to every surface (default: Diffuse())
        environment: Background for escaping rays (default: sky gradient)
        shadow_bias: Hits with t <= shadow_bias are ignored

    Returns:
        Linear-space color for this ray
    """
    material = material if material is not None else Diffuse()
    environment = environment if environment is not None else GradientEnvironment()

    attenuation = Color(1.0, 1.0, 1.0)
    for _ in range(depth):
        hit_record = world.hit(ray, shadow_bias, math.inf)
        if hit_record is None:
            return attenuation * environment.sample(ray.direction)

        scatter_result = material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return Color(0, 0, 0)
        attenuation = attenuation * scatter_result.attenuation
        ray = scatter_result.scattered_ray

    return Color(0, 0, 0)


class Renderer:
    """Path tracing renderer with optional multi-threading."""

    def __init__(
        self,
        settings: Optional[RenderSettings] = None,
        environment: Optional[Environment] = None
    ):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
            environment: Background for escaping rays (sky gradient if None)
        """
        self.settings = settings if settings else RenderSettings()
        self.environment = environment if environment else GradientEnvironment()
        self.material = Diffuse(self.settings.reflectance, self.settings.scatter_policy)
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Optional[Callable[[float], None]]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def ray_color(self, ray: Ray, world: Hittable, rng: RandomSource) -> Color:
        """Trace one ray with this renderer's depth, material and background."""
        return ray_color(
            ray, world, self.settings.max_depth, rng,
            material=self.material,
            environment=self.environment,
            shadow_bias=self.settings.shadow_bias
        )

    def render_pixel(
        self,
        world: Hittable,
        camera: Camera,
        i: int,
        j: int,
        rng: RandomSource
    ) -> Color:
        """Sum `samples_per_pixel` jittered samples for one pixel.

        Args:
            world: The scene to render
            camera: The camera to render from
            i: Column, 0 = left
            j: Scanline, 0 = bottom
            rng: Source of random samples

        Returns:
            The sum (not the average) of the sample colors
        """
        width = self.settings.width
        height = self.settings.height
        pixel_color = Color(0, 0, 0)

        for _ in range(self.settings.samples_per_pixel):
            u = (i + rng.uniform01()) / (width - 1)
            v = (j + rng.uniform01()) / (height - 1)

            ray = camera.get_ray(u, v)
            pixel_color = pixel_color + self.ray_color(ray, world, rng)

        return pixel_color

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the per-pixel color sums.

        The samples of each pixel are summed, not averaged: dividing by
        `samples_per_pixel` and gamma correction belong to the output
        stage (see `to_ldr` and `save_image`).

        Args:
            world: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Array of shape (height, width, 3); row 0 is the top scanline
        """
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel

        sums = np.zeros((height, width, 3), dtype=np.float64)

        tiles = self._generate_tiles(width, height)
        # One stream per tile keeps results independent of scheduling.
        streams = NumpyRandomSource(self.settings.seed).spawn(len(tiles))
        total_tiles = len(tiles)
        completed_tiles = [0]
        progress_lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %s scattering, %d tiles on %d thread(s)",
            width, height, samples, self.settings.max_depth,
            self.settings.scatter_policy.value, total_tiles, self.settings.num_threads
        )

        def render_tile(tile: Tile, rng: RandomSource) -> None:
            """Render a single tile into its slice of the sum buffer."""
            x0, y0, x1, y1 = tile

            for row in range(y0, y1):
                j = height - 1 - row
                for i in range(x0, x1):
                    sums[row, i] = self.render_pixel(world, camera, i, j, rng).to_array()

            with progress_lock:
                completed_tiles[0] += 1
                done = completed_tiles[0]
                logger.debug("Tile %s done (%d/%d)", tile, done, total_tiles)
                if self._progress_callback:
                    self._progress_callback(done / total_tiles)

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # list() re-raises the first worker exception here
                list(executor.map(render_tile, tiles, streams))
        else:
            for tile, rng in zip(tiles, streams):
                render_tile(tile, rng)

        return sums

    def _generate_tiles(self, width: int, height: int) -> list[Tile]:
        """Generate tiles in row-major order, top scanlines first.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    def to_ldr(self, sums: np.ndarray) -> np.ndarray:
        """Convert a sum buffer from `render` to 8-bit gamma-corrected RGB."""
        return output.to_ldr(sums, self.settings.samples_per_pixel)

    def save_image(self, sums: np.ndarray, filename: str) -> None:
        """Save a sum buffer from `render` to file.

        Args:
            sums: Per-pixel color sums
            filename: Output filename (extension determines format)
        """
        output.save_image(sums, self.settings.samples_per_pixel, filename)
