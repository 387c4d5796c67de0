"""
spheretrace - A Python Monte-Carlo Ray Tracer for Spheres

Renders scenes made of spheres lit by a sky gradient:
- Diffuse path tracing with selectable scattering (naive, Lambertian, hemisphere)
- Jittered supersampling from a pinhole camera
- Deterministic, optionally multi-threaded tile rendering
- Plain-text PPM (P3) and Pillow image output
- YAML/JSON scene files
"""

__version__ = "0.1.0"
__author__ = "spheretrace Team"

from .vec3 import Vec3, Point3, Color
from .sampling import RandomSource, NumpyRandomSource
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, Diffuse, ScatterPolicy, ScatterResult
from .environment import Environment, GradientEnvironment
from .camera import Camera
from .renderer import Renderer, RenderSettings, ray_color
from .output import to_ldr, write_color, write_ppm, save_image
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
