"""
Camera module for generating primary rays.

A fixed pinhole camera looking down -Z with +Y up. The viewport is a
rectangle `focal_length` units in front of the origin; its height is
`viewport_height` and its width follows from the aspect ratio.
"""

from __future__ import annotations
from typing import Optional
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera mapping image-plane coordinates to world rays."""

    __slots__ = ('aspect_ratio', 'viewport_height', 'viewport_width', 'focal_length',
                 'origin', 'horizontal', 'vertical', 'lower_left_corner')

    def __init__(
        self,
        aspect_ratio: float = 16.0 / 9.0,
        viewport_height: float = 2.0,
        focal_length: float = 1.0,
        origin: Optional[Point3] = None
    ):
        """Create a camera.

        Args:
            aspect_ratio: Width / Height ratio
            viewport_height: Height of the viewport in world units
            focal_length: Distance from origin to the viewport plane
            origin: Camera position in world space (default: world origin)
        """
        if aspect_ratio <= 0 or viewport_height <= 0 or focal_length <= 0:
            raise ValueError(
                "aspect_ratio, viewport_height and focal_length must be positive"
            )

        self.aspect_ratio = aspect_ratio
        self.viewport_height = viewport_height
        self.viewport_width = aspect_ratio * viewport_height
        self.focal_length = focal_length

        self.origin = origin if origin is not None else Point3(0, 0, 0)
        self.horizontal = Vec3(self.viewport_width, 0, 0)
        self.vertical = Vec3(0, viewport_height, 0)
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - Vec3(0, 0, focal_length)
        )

    def get_ray(self, u: float, v: float) -> Ray:
        """Generate a ray for the given UV coordinates on the image plane.

        Args:
            u: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            v: Vertical coordinate [0, 1] (0 = bottom, 1 = top)

        Returns:
            A ray from the camera origin through the viewport point. The
            direction is not normalized.
        """
        direction = (
            self.lower_left_corner
            + self.horizontal * u
            + self.vertical * v
            - self.origin
        )
        return Ray(self.origin, direction)

    def __repr__(self) -> str:
        return (
            f"Camera(origin={self.origin}, aspect_ratio={self.aspect_ratio:.4f}, "
            f"viewport_height={self.viewport_height}, focal_length={self.focal_length})"
        )
