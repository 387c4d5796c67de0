"""
Background shading for rays that escape the scene.

The only light in a scene comes from the environment: a vertical gradient
between a horizon colour and a zenith colour.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .vec3 import Vec3, Color


class Environment(ABC):
    """Abstract base class for environment lighting."""

    @abstractmethod
    def sample(self, direction: Vec3) -> Color:
        """Get the environment color for a given direction.

        Args:
            direction: The direction to sample (any non-zero length)

        Returns:
            Color value from the environment
        """
        pass


class GradientEnvironment(Environment):
    """A vertical gradient environment (simple sky).

    The blend factor is 0.5 * (unit_direction.y + 1), so straight down is
    pure bottom colour and straight up is pure top colour.
    """

    def __init__(
        self,
        bottom_color: Color = Color(1.0, 1.0, 1.0),
        top_color: Color = Color(0.5, 0.7, 1.0)
    ):
        """Create a gradient environment.

        Args:
            bottom_color: Color looking straight down
            top_color: Color looking straight up
        """
        self.bottom_color = bottom_color
        self.top_color = top_color

    def sample(self, direction: Vec3) -> Color:
        unit_direction = direction.normalize()
        t = 0.5 * (unit_direction.y + 1.0)
        return self.bottom_color * (1.0 - t) + self.top_color * t

    def __repr__(self) -> str:
        return f"GradientEnvironment(bottom={self.bottom_color}, top={self.top_color})"
