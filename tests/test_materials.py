"""Tests for diffuse scattering."""

import pytest
import math
from spheretrace.vec3 import Vec3, Point3, Color
from spheretrace.ray import Ray
from spheretrace.shapes import HitRecord
from spheretrace.sampling import NumpyRandomSource, RandomSource
from spheretrace.materials import Diffuse, ScatterPolicy, scatter_direction


class ZeroSource(RandomSource):
    """Always returns 0.5, so every cube sample is the zero vector."""

    def uniform01(self):
        return 0.5


def make_hit(normal=Vec3(0, 1, 0), point=Point3(0, 0, 0)):
    return HitRecord(point=point, normal=normal, t=1.0, front_face=True)


class TestScatterPolicy:
    """Test ScatterPolicy parsing."""

    @pytest.mark.parametrize("name,expected", [
        ("naive", ScatterPolicy.NAIVE),
        ("LAMBERTIAN", ScatterPolicy.LAMBERTIAN),
        ("Hemisphere", ScatterPolicy.HEMISPHERE),
        (ScatterPolicy.NAIVE, ScatterPolicy.NAIVE),
    ])
    def test_parse(self, name, expected):
        assert ScatterPolicy.parse(name) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown scatter policy"):
            ScatterPolicy.parse("specular")


class TestScatterDirection:
    """Test the three bounce-direction policies."""

    def test_naive_within_unit_sphere_of_normal_tip(self):
        rng = NumpyRandomSource(1)
        normal = Vec3(0, 1, 0)
        for _ in range(200):
            d = scatter_direction(ScatterPolicy.NAIVE, normal, rng)
            assert (d - normal).length_squared() < 1

    def test_lambertian_on_unit_sphere_of_normal_tip(self):
        rng = NumpyRandomSource(2)
        normal = Vec3(0, 1, 0)
        for _ in range(200):
            d = scatter_direction(ScatterPolicy.LAMBERTIAN, normal, rng)
            assert abs((d - normal).length() - 1.0) < 1e-9

    def test_hemisphere_on_normal_side(self):
        rng = NumpyRandomSource(3)
        normal = Vec3(0, 0, -1)
        for _ in range(200):
            d = scatter_direction(ScatterPolicy.HEMISPHERE, normal, rng)
            assert d.dot(normal) >= 0
            assert d.length_squared() < 1

    def test_policies_differ_in_distribution(self):
        # Mean cosine with the normal: cos^3 > cos > uniform hemisphere
        normal = Vec3(0, 1, 0)
        means = {}
        for policy in ScatterPolicy:
            rng = NumpyRandomSource(11)
            total = 0.0
            for _ in range(4000):
                d = scatter_direction(policy, normal, rng)
                total += d.normalize().dot(normal)
            means[policy] = total / 4000

        assert means[ScatterPolicy.NAIVE] > means[ScatterPolicy.LAMBERTIAN]
        assert means[ScatterPolicy.LAMBERTIAN] > means[ScatterPolicy.HEMISPHERE]
        # Cosine-weighted: E[cos] = 2/3; uniform hemisphere: E[cos] = 1/2
        assert means[ScatterPolicy.LAMBERTIAN] == pytest.approx(2 / 3, abs=0.03)
        assert means[ScatterPolicy.HEMISPHERE] == pytest.approx(1 / 2, abs=0.03)


class TestDiffuse:
    """Test Diffuse material."""

    def test_defaults(self):
        mat = Diffuse()
        assert mat.reflectance == 0.5
        assert mat.policy is ScatterPolicy.LAMBERTIAN

    def test_policy_from_string(self):
        assert Diffuse(policy="hemisphere").policy is ScatterPolicy.HEMISPHERE

    @pytest.mark.parametrize("policy", list(ScatterPolicy))
    def test_scatter_always_succeeds(self, policy):
        mat = Diffuse(policy=policy)
        rng = NumpyRandomSource(5)
        ray_in = Ray(Point3(0, 2, 0), Vec3(0, -1, 0))
        for _ in range(50):
            assert mat.scatter(ray_in, make_hit(), rng) is not None

    @pytest.mark.parametrize("policy", list(ScatterPolicy))
    def test_scattered_from_hit_point_into_normal_side(self, policy):
        mat = Diffuse(policy=policy)
        rng = NumpyRandomSource(6)
        hit = make_hit(normal=Vec3(0, 1, 0), point=Point3(1, 2, 3))
        ray_in = Ray(Point3(1, 5, 3), Vec3(0, -1, 0))

        for _ in range(100):
            result = mat.scatter(ray_in, hit, rng)
            assert result.scattered_ray.origin == hit.point
            assert result.scattered_ray.direction.dot(hit.normal) >= 0

    def test_attenuation_matches_reflectance(self):
        mat = Diffuse(reflectance=0.3)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(), NumpyRandomSource(0))
        assert result.attenuation == Color(0.3, 0.3, 0.3)

    def test_degenerate_direction_falls_back_to_normal(self):
        mat = Diffuse(policy=ScatterPolicy.HEMISPHERE)
        hit = make_hit(normal=Vec3(0, 1, 0))
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), hit, ZeroSource())
        assert result.scattered_ray.direction == hit.normal

    def test_repr(self):
        assert "hemisphere" in repr(Diffuse(policy="hemisphere"))
