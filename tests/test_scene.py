"""Tests for the scene query and the recursive shading function."""

import pytest
import math
from whitted.vec3 import Vec3, Point3, Color
from whitted.ray import Ray
from whitted.shapes import Sphere
from whitted.materials import Material
from whitted.scene import Scene, EPSILON, LIGHT_DIRECTION, local_color, shading_weights


def opaque(ambient=Color(0.4, 0.6, 0.8)):
    return Material(ambient, Color(0.5, 0.5, 0.5), Color(1, 1, 1), 8, local=1.0)


def mirror():
    return Material(Color(1, 1, 1), Color(1, 1, 1), Color(1, 1, 1), 8, local=0.0)


def glass(local=0.2):
    return Material(Color(0.3, 0.3, 0.3), Color(0.5, 0.5, 0.5), Color(1, 1, 1), 8, local=local, ior=1.5)


class RecordingScene(Scene):
    """Scene that remembers every trace_ray call, recursive ones included."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def trace_ray(self, ray, ior=1.0, depth=9):
        self.calls.append((ray, ior, depth))
        return super().trace_ray(ray, ior, depth)


class TestSceneContainer:
    """Test scene construction."""

    def test_default_background_is_black(self):
        assert Scene().background == Color(0, 0, 0)

    def test_add_and_len(self):
        scene = Scene()
        scene.add(Sphere(Point3(0, 0, 5), 1.0, opaque()))
        scene.add(Sphere(Point3(0, 0, 9), 1.0, opaque()))
        assert len(scene) == 2
        assert [s.center.z for s in scene] == [5, 9]


class TestSceneIntersect:
    """Test nearest-hit queries."""

    def test_empty_scene(self):
        assert Scene().intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1))) is None

    def test_nearest_wins_regardless_of_order(self):
        near, far = opaque(Color(1, 0, 0)), opaque(Color(0, 1, 0))
        scene = Scene()
        scene.add(Sphere(Point3(0, 0, 10), 1.0, far))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, near))

        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.t == pytest.approx(4.0)
        assert hit.material is near

    def test_tie_keeps_first_added(self):
        first, second = opaque(Color(1, 0, 0)), opaque(Color(0, 1, 0))
        scene = Scene()
        scene.add(Sphere(Point3(0, 0, 5), 1.0, first))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, second))

        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.material is first

    def test_skips_spheres_behind(self):
        scene = Scene()
        scene.add(Sphere(Point3(0, 0, -3), 1.0, opaque()))
        scene.add(Sphere(Point3(0, 0, 8), 1.0, opaque()))

        hit = scene.intersect(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.t == pytest.approx(7.0)


class TestLocalColor:
    """Test the Phong term."""

    def test_ambient_only_when_normal_is_horizontal(self):
        color = local_color(opaque(), Vec3(0, 0, 1), Vec3(0, 0, -1))
        assert color == Color(0.2, 0.3, 0.4)

    def test_diffuse_is_not_clamped(self):
        # A face pointing away from the light darkens the ambient term
        mat = Material(Color(1, 1, 1), Color(0.2, 0.2, 0.2), Color(1, 1, 1), 8)
        color = local_color(mat, Vec3(1, 0, 0), Vec3(0, -1, 0))
        assert color == Color(0.3, 0.3, 0.3)

    def test_specular_highlight(self):
        mat = Material(Color(0, 0, 0), Color(0.1, 0.1, 0.1), Color(1, 1, 1), 2)
        color = local_color(mat, Vec3(1, -1, 0).normalize(), Vec3(0, 1, 0))
        # diffuse 0.1 * 1, specular (1/sqrt(2))^2
        assert color == Color(0.6, 0.6, 0.6)

    def test_channels_are_clamped(self):
        mat = Material(Color(1, 1, 1), Color(1, 1, 1), Color(1, 1, 1), 2)
        color = local_color(mat, Vec3(1, -1, 0).normalize(), Vec3(0, 1, 0))
        assert color == Color(1, 1, 1)

    def test_light_points_up(self):
        assert LIGHT_DIRECTION == Vec3(0, 1, 0)


class TestShadingWeights:
    """Test the local/reflection/refraction split."""

    def test_fully_local(self):
        assert shading_weights(opaque(), -0.7) == (1.0, 0.0, 0.0)

    def test_reflective_only(self):
        mat = Material(Color(0, 0, 0), Color(0, 0, 0), Color(0, 0, 0), 8, local=0.7)
        l, r, t = shading_weights(mat, -1.0)
        assert r == pytest.approx(0.3)
        assert l == pytest.approx(0.7)
        assert t == 0.0

    def test_refractive(self):
        l, r, t = shading_weights(glass(local=0.2), -1.0)
        assert l == pytest.approx(0.2)
        assert r == pytest.approx(0.04 * 0.8)
        assert t == pytest.approx(0.96 * 0.8)

    @pytest.mark.parametrize("material", [opaque(), mirror(), glass(), glass(local=0.0),
                                          Material(Color(0, 0, 0), Color(0, 0, 0), Color(0, 0, 0), 8, local=0.5)])
    @pytest.mark.parametrize("cos_i", [-1.0, -0.5, -0.1, 0.0, 0.3, 0.9, 1.0])
    def test_weights_sum_to_one(self, material, cos_i):
        assert sum(shading_weights(material, cos_i)) == pytest.approx(1.0)


class TestTraceRayTermination:
    """Test the two base cases."""

    def test_zero_depth_is_black(self):
        scene = Scene(Color(0.5, 0.5, 0.5))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, opaque()))

        for direction in (Vec3(0, 0, 1), Vec3(0, 0, -1)):
            color = scene.trace_ray(Ray(Point3(0, 0, 0), direction), 1.0, 0)
            assert color == Color(0, 0, 0)

    def test_miss_returns_background(self):
        background = Color(0.1, 0.2, 0.3)
        scene = Scene(background)
        scene.add(Sphere(Point3(0, 0, 5), 1.0, opaque()))

        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 1.0, 5)
        assert color == background

    def test_background_result_is_a_copy(self):
        scene = Scene(Color(0.1, 0.2, 0.3))
        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 3)
        color += Color(1, 1, 1)
        assert scene.background == Color(0.1, 0.2, 0.3)


class TestTraceRayShading:
    """End-to-end shading scenarios."""

    @pytest.mark.parametrize("depth", [1, 2, 9])
    def test_opaque_sphere_is_local_color(self, depth):
        mat = opaque()
        scene = Scene(Color(0, 0, 0))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, mat))

        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, depth)
        assert color == local_color(mat, Vec3(0, 0, 1), Vec3(0, 0, -1))
        assert color == Color(0.2, 0.3, 0.4)

    def test_opaque_sphere_spawns_no_rays(self):
        scene = RecordingScene(Color(0, 0, 0))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, opaque()))
        scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 3)
        assert len(scene.calls) == 1

    def test_mirror_shows_background(self):
        background = Color(0.2, 0.4, 0.6)
        scene = Scene(background)
        scene.add(Sphere(Point3(0, 0, 5), 1.0, mirror()))

        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 2)
        assert color == background

    def test_mirror_with_exhausted_budget_is_black(self):
        scene = Scene(Color(0.2, 0.4, 0.6))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, mirror()))

        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 1)
        assert color == Color(0, 0, 0)

    def test_mirror_reflects_other_sphere(self):
        red = opaque(Color(1, 0, 0))
        scene = Scene(Color(0, 0, 0))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, mirror()))
        scene.add(Sphere(Point3(0, 0, -5), 1.0, red))

        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 3)
        assert color == Color(0.5, 0, 0)


class TestTraceRayBounces:
    """Test the rays spawned at reflective and refractive hits."""

    def test_entering_glass(self):
        scene = RecordingScene(Color(1, 1, 1))
        sphere = Sphere(Point3(0, 0, 5), 1.0, glass())
        scene.add(sphere)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0.1, 1).normalize())

        scene.trace_ray(ray, 1.0, 1)

        assert len(scene.calls) == 3
        (reflected, reflected_ior, reflected_depth) = scene.calls[1]
        (refracted, refracted_ior, refracted_depth) = scene.calls[2]

        assert reflected_ior == 1.0
        assert refracted_ior == 1.5
        assert reflected_depth == refracted_depth == 0

        hit = sphere.intersect(ray)
        inward = -hit.normal
        # Bent towards the normal
        assert refracted.direction.dot(inward) / refracted.direction.length() > ray.direction.dot(inward)
        assert reflected.direction.dot(hit.normal) > 0
        # Origins stay within the bias distance of the surface
        assert abs((refracted.origin - sphere.center).length() - 1.0) < 3 * EPSILON
        assert abs((reflected.origin - sphere.center).length() - 1.0) < 3 * EPSILON

    def test_exiting_glass(self):
        scene = RecordingScene(Color(1, 1, 1))
        scene.add(Sphere(Point3(0, 0, 0), 1.0, glass()))
        direction = Vec3(0, 0.1, 1).normalize()

        scene.trace_ray(Ray(Point3(0, 0, 0), direction), 1.5, 1)

        assert [ior for _, ior, _ in scene.calls[1:]] == [1.5, 1.0]
        refracted = scene.calls[2][0]
        # Normal incidence from the center: the ray leaves undeflected
        assert refracted.direction == direction
        assert abs(refracted.origin.length() - 1.0) < 3 * EPSILON

    def test_total_internal_reflection_spawns_only_reflection(self):
        scene = RecordingScene(Color(1, 1, 1))
        mat = glass(local=0.5)
        scene.add(Sphere(Point3(0, 0, 0), 1.0, mat))
        ray = Ray(Point3(0, 0.9, -0.3), Vec3(0, 0, 1))

        color = scene.trace_ray(ray, 1.5, 1)

        assert len(scene.calls) == 2
        assert scene.calls[1][1] == 1.5
        # Children at depth 0 are black, only the local share remains
        hit_normal = Vec3(0, 0.9, math.sqrt(0.19))
        expected = local_color(mat, ray.direction, hit_normal) * 0.5
        assert color == expected

    def test_recursion_depth_is_bounded(self):
        scene = RecordingScene(Color(1, 1, 1))
        scene.add(Sphere(Point3(-1, 0, 5), 1.5, glass()))
        scene.add(Sphere(Point3(2, 0, 7), 1.5, mirror()))

        scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 1.0, 4)

        assert min(depth for _, _, depth in scene.calls) >= 0
        assert scene.calls[0][2] == 4

    def test_glass_color_is_finite_and_bounded(self):
        scene = Scene(Color(1, 1, 1))
        scene.add(Sphere(Point3(0, 0, 5), 1.0, glass()))

        color = scene.trace_ray(Ray(Point3(0, 0, 0), Vec3(0.05, 0.1, 1).normalize()), 1.0, 9)
        assert all(math.isfinite(c) for c in color)
        assert all(0.0 <= c <= 1.0 + 1e-9 for c in color)
