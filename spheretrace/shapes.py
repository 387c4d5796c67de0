"""
Geometric shapes for the ray tracer.

Each shape must implement the Hittable protocol with a `hit` method.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal (always points against the ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool = True

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Lower bound of the open interval of accepted t
            t_max: Upper bound of the open interval of accepted t

        Returns:
            HitRecord for the nearest t inside (t_min, t_max), None otherwise
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (can be negative for inward normals)
        """
        self.center = center
        self.radius = radius

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0, solved here with b = 2·half_b.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a == 0.0:
            # Zero-length direction: the ray is a single point, nothing to hit.
            return None
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root strictly inside the acceptable range
        root = (-half_b - sqrtd) / a
        if root <= t_min or root >= t_max:
            root = (-half_b + sqrtd) / a
            if root <= t_min or root >= t_max:
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius

        hit_record = HitRecord(point=point, normal=outward_normal, t=root)
        hit_record.set_face_normal(ray, outward_normal)

        return hit_record

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class HittableList(Hittable):
    """A collection of hittable objects.

    Members are shared, not copied: the same object may sit in several
    lists. Nothing here mutates a member.
    """

    def __init__(self, objects: Optional[Iterable[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each member is queried with the closest t found so far as its upper
        bound, so a later member only wins with a strictly smaller t. Ties go
        to the member inserted first.
        """
        closest_hit: Optional[HitRecord] = None
        closest_so_far = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_so_far)
            if hit_record is not None:
                closest_hit = hit_record
                closest_so_far = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
