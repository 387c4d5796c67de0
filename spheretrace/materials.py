"""
Diffuse scattering.

Three interchangeable ways of picking a bounce direction off a matte
surface. They are not numerically equivalent, so the active one is part of
the render configuration:

- NAIVE: normal + point in unit sphere (cos³ distribution)
- LAMBERTIAN: normal + point on unit sphere (true cosine distribution)
- HEMISPHERE: point in unit sphere flipped into the normal's hemisphere
  (uniform over the hemisphere)
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .vec3 import Vec3, Color
from .ray import Ray
from .sampling import RandomSource
from .shapes import HitRecord


class ScatterPolicy(Enum):
    """Diffuse bounce direction policies."""
    NAIVE = "naive"
    LAMBERTIAN = "lambertian"
    HEMISPHERE = "hemisphere"

    @classmethod
    def parse(cls, value: Union[ScatterPolicy, str]) -> ScatterPolicy:
        """Accept an enum member or its (case-insensitive) name/value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown scatter policy {value!r} (expected one of: {choices})") from None


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: RandomSource) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: Intersection the ray produced
            rng: Source of random samples

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass


def scatter_direction(policy: ScatterPolicy, normal: Vec3, rng: RandomSource) -> Vec3:
    """Return the offset from the hit point to the scatter target."""
    if policy is ScatterPolicy.NAIVE:
        return normal + Vec3.random_in_unit_sphere(rng)
    if policy is ScatterPolicy.LAMBERTIAN:
        return normal + Vec3.random_unit_vector(rng)
    if policy is ScatterPolicy.HEMISPHERE:
        return Vec3.random_in_hemisphere(normal, rng)
    raise ValueError(f"Unsupported scatter policy: {policy!r}")


class Diffuse(Material):
    """Grey matte material that absorbs a fixed fraction per bounce."""

    def __init__(
        self,
        reflectance: float = 0.5,
        policy: Union[ScatterPolicy, str] = ScatterPolicy.LAMBERTIAN
    ):
        """Create a diffuse material.

        Args:
            reflectance: Fraction of light kept per bounce
            policy: How bounce directions are sampled
        """
        self.reflectance = reflectance
        self.policy = ScatterPolicy.parse(policy)
        self.attenuation = Color(reflectance, reflectance, reflectance)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: RandomSource) -> Optional[ScatterResult]:
        direction = scatter_direction(self.policy, hit.normal, rng)

        # Catch degenerate scatter direction
        if direction.near_zero():
            direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction),
            attenuation=self.attenuation
        )

    def __repr__(self) -> str:
        return f"Diffuse(reflectance={self.reflectance}, policy={self.policy.value})"
