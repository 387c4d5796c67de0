"""
Scene description file parser.

Supports YAML (and JSON, which YAML parsing also accepts) scene files with:
- Camera configuration
- Render settings
- A list of spheres

Example scene file:
```yaml
camera:
  viewport_height: 2.0
  focal_length: 1.0
  origin: [0, 0, 0]

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50
  scatter: lambertian
  seed: 7

objects:
  - type: sphere
    center: [0, 0, -1]
    radius: 0.5

  - type: sphere
    center: [0, -100.5, -1]
    radius: 100
```

The camera aspect ratio defaults to width / height from the render section.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import yaml

from .vec3 import Vec3, Point3
from .camera import Camera
from .shapes import Sphere, HittableList
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

# Scene file key -> RenderSettings field
_RENDER_KEYS = {
    'width': 'width',
    'height': 'height',
    'samples': 'samples_per_pixel',
    'samples_per_pixel': 'samples_per_pixel',
    'max_depth': 'max_depth',
    'scatter': 'scatter_policy',
    'scatter_policy': 'scatter_policy',
    'shadow_bias': 'shadow_bias',
    'reflectance': 'reflectance',
    'seed': 'seed',
    'tile_size': 'tile_size',
    'threads': 'num_threads',
    'num_threads': 'num_threads',
}


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: Union[str, Path]) -> Tuple[HittableList, Camera, RenderSettings]:
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
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        logger.debug("Loaded scene file %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene must be a mapping, got {type(data).__name__}")

        self._parse_settings(data.get('render', {}))

        if 'objects' in data:
            self._parse_objects(data['objects'])

        self._parse_camera(data.get('camera', {}))

        logger.info("Parsed scene with %d object(s)", len(self.objects))
        return self.objects, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        try:
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
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_float(self, data: Any, name: str) -> float:
        try:
            return float(data)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"{name} must be a number, got {data!r}") from e

    def _parse_objects(self, objects_data: Any) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list")

        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Invalid object entry: {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = self._parse_float(obj_data.get('radius', 1.0), 'radius')
                self.objects.add(Sphere(center, radius))
            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError("'camera' must be a mapping")

        aspect_ratio = camera_data.get('aspect_ratio', self.settings.aspect_ratio)
        origin = Point3(0, 0, 0)
        if 'origin' in camera_data:
            origin = self._parse_vec3(camera_data['origin'])

        try:
            self.camera = Camera(
                aspect_ratio=self._parse_float(aspect_ratio, 'aspect_ratio'),
                viewport_height=self._parse_float(camera_data.get('viewport_height', 2.0), 'viewport_height'),
                focal_length=self._parse_float(camera_data.get('focal_length', 1.0), 'focal_length'),
                origin=origin
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

    def _parse_settings(self, render_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        if not isinstance(render_data, dict):
            raise SceneParseError("'render' must be a mapping")

        kwargs = {}
        for key, value in render_data.items():
            if key not in _RENDER_KEYS:
                raise SceneParseError(f"Unknown render setting: {key}")
            kwargs[_RENDER_KEYS[key]] = value

        try:
            self.settings = RenderSettings(**kwargs)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: Union[str, Path]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    return SceneParser().parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to parse a scene dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, camera, settings)
    """
    return SceneParser().parse_dict(data)
