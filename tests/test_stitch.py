"""Tests for conic rasterization (scanning plus stitching)."""

import math

import pytest

from conics.geometry.conversion import circle_to_conic, ellipse_to_conic
from conics.geometry.primitives import ConicCoefficients, ScanDomain
from conics.tracer.stitch import rasterize_conic, stitch_branches, trace_branches


CIRCLE = (1.0, 0.0, 1.0, -6.0, -6.0, 14.0)        # (x-3)² + (y-3)² = 4
HYPERBOLA = (1.0, 0.0, -1.0, 0.0, 0.0, -1.0)      # x² - y² = 1


def xs_of(polylines):
    return [p.x for polyline in polylines for p in polyline]


class TestScanDomain:
    """Test scan domain validation."""

    def test_from_width(self):
        domain = ScanDomain.from_width(640)
        assert domain == (0, 640)
        assert domain.width == 640
        assert domain.last == 639
        assert 0 in domain
        assert 640 not in domain

    def test_reversed_bounds(self):
        with pytest.raises(ValueError):
            ScanDomain(5, 2)

    def test_non_integer_bounds(self):
        with pytest.raises(ValueError):
            ScanDomain(0.5, 3)
        with pytest.raises(ValueError):
            ScanDomain(0, True)


class TestRasterizeCircle:
    """Test closed curves."""

    def test_single_closed_polyline(self):
        polylines = rasterize_conic(CIRCLE, ScanDomain.from_width(10))
        assert len(polylines) == 1
        polyline = polylines[0]
        assert polyline[0] == polyline[-1]
        xs = [p.x for p in polyline]
        assert min(xs) == 1
        assert max(xs) == 5
        assert len(polyline) == 11

    def test_points_lie_on_circle(self):
        polylines = rasterize_conic(CIRCLE, ScanDomain.from_width(10))
        for p in polylines[0]:
            assert (p.x - 3) ** 2 + (p.y - 3) ** 2 == pytest.approx(4.0)

    def test_negative_branch_then_positive_branch(self):
        """The negative roots run left to right, then the positive roots run back."""
        polyline = rasterize_conic(CIRCLE, ScanDomain.from_width(10))[0]
        assert [p.x for p in polyline[:5]] == [1, 2, 3, 4, 5]
        assert [p.x for p in polyline[5:10]] == [5, 4, 3, 2, 1]
        assert polyline[2].y < 3 < polyline[7].y

    def test_scaled_circle_coefficients(self):
        polylines = rasterize_conic(circle_to_conic(2, 3, 3), ScanDomain.from_width(10))
        assert len(polylines) == 1
        assert min(xs_of(polylines)) == 1
        assert max(xs_of(polylines)) == 5

    def test_curve_leaving_the_left_edge_stays_open(self):
        """Centred on the left edge: only the right end is a tip."""
        polylines = rasterize_conic((1.0, 0.0, 1.0, 0.0, 0.0, -25.0), ScanDomain.from_width(10))
        assert len(polylines) == 1
        polyline = polylines[0]
        assert polyline[0] != polyline[-1]
        assert polyline[0] == pytest.approx((0.0, -5.0))
        assert polyline[-1] == pytest.approx((0.0, 5.0))

    def test_curve_wider_than_domain_gives_two_open_arcs(self):
        """Both ends of the arc are on the domain boundary."""
        conic = circle_to_conic(100, 5, 0)
        polylines = rasterize_conic(conic, ScanDomain.from_width(10))
        assert len(polylines) == 2
        for polyline in polylines:
            assert [p.x for p in polyline] in (list(range(10)), list(range(9, -1, -1)))
        assert all(p.y < 0 for p in polylines[0])
        assert all(p.y > 0 for p in polylines[1])

    def test_rotated_ellipse(self):
        conic = ellipse_to_conic(30, 10, 50, 50, 0.5)
        polylines = rasterize_conic(conic, ScanDomain.from_width(100))
        assert len(polylines) == 1
        assert polylines[0][0] == polylines[0][-1]


class TestRasterizeHyperbola:
    """Test curves with two disjoint arcs."""

    def test_two_branches(self):
        polylines = rasterize_conic(HYPERBOLA, ScanDomain(-10, 10))
        assert len(polylines) == 2
        assert all(len(polyline) >= 2 for polyline in polylines)

    def test_no_samples_between_vertices(self):
        polylines = rasterize_conic(HYPERBOLA, ScanDomain(-10, 10))
        assert all(abs(x) >= 1 for x in xs_of(polylines))

    def test_left_and_right_arcs(self):
        left, right = rasterize_conic(HYPERBOLA, ScanDomain(-10, 10))
        assert all(p.x < 0 for p in left)
        assert all(p.x > 0 for p in right)

    def test_right_arc_joined_at_vertex(self):
        right = rasterize_conic(HYPERBOLA, ScanDomain(-10, 10))[1]
        xs = [p.x for p in right]
        assert xs[0] == 9
        assert xs[-1] == 9
        assert min(xs) == 1

    def test_trace_branches(self):
        branches = trace_branches(ConicCoefficients(*HYPERBOLA), ScanDomain(-10, 10))
        assert [p.x for p in branches.left_negative] == list(range(-10, 0))
        assert [p.x for p in branches.left_positive] == list(range(-1, -11, -1))
        assert [p.x for p in branches.right_positive] == list(range(9, 0, -1))
        assert [p.x for p in branches.right_negative] == list(range(1, 10))
        assert not branches.single_valued


class TestSingleValued:
    """Test conics with C = 0."""

    def test_parabola(self):
        polylines = rasterize_conic((1.0, 0.0, 0.0, 0.0, -1.0, 0.0), ScanDomain.from_width(5))
        assert len(polylines) == 1
        assert [tuple(p) for p in polylines[0]] == [
            (0, 0.0), (1, 1.0), (2, 4.0), (3, 9.0), (4, 16.0)]

    def test_line(self):
        polylines = rasterize_conic((0.0, 0.0, 0.0, 1.0, -1.0, 0.0), ScanDomain.from_width(5))
        assert len(polylines) == 1
        assert all(p.x == pytest.approx(p.y) for p in polylines[0])

    def test_rectangular_hyperbola_xy(self):
        """xy = 1 has a pole at x = 0, leaving two arcs."""
        polylines = rasterize_conic((0.0, 1.0, 0.0, 0.0, 0.0, -1.0), ScanDomain(-5, 5))
        assert len(polylines) == 2
        assert 0 not in xs_of(polylines)


class TestRasterizeProperties:
    """Test general properties of rasterization."""

    def test_invisible_curve(self):
        assert rasterize_conic(CIRCLE, ScanDomain(20, 40)) == []

    def test_imaginary_curve(self):
        assert rasterize_conic((1.0, 0.0, 1.0, 0.0, 0.0, 1.0), ScanDomain(-10, 10)) == []

    def test_idempotent(self):
        domain = ScanDomain(-10, 10)
        assert rasterize_conic(HYPERBOLA, domain) == rasterize_conic(HYPERBOLA, domain)

    @pytest.mark.parametrize("width", [1, 2, 7, 50, 333])
    @pytest.mark.parametrize("conic", [
        CIRCLE,
        HYPERBOLA,
        (1.0, 0.0, 1.0, 0.0, 0.0, -1.0e4),
        (0.0, 0.0, 0.0, 1.0, -1.0, 0.0),
        (1.0, 2.0, -3.0, 4.0, 5.0, -600.0),
    ])
    def test_samples_stay_inside_domain(self, conic, width):
        for x in xs_of(rasterize_conic(conic, ScanDomain.from_width(width))):
            assert 0 <= x < width

    def test_polylines_have_at_least_two_points(self):
        """A curve seen through a single column cannot be drawn."""
        polylines = rasterize_conic(circle_to_conic(100, 0, 0), ScanDomain.from_width(1))
        assert polylines == []

    def test_stitch_empty_branches(self):
        branches = trace_branches(ConicCoefficients(*CIRCLE), ScanDomain(20, 40))
        assert stitch_branches(branches, ScanDomain(20, 40)) == []


class TestLargeCoefficientScale:
    """Test conics whose coefficients are all very small or very large."""

    @pytest.mark.parametrize("k", [0.0, 50.0])
    def test_arc_of_huge_circle(self, k):
        """Only the arc x <= 5 of a circle of radius 40000 enters the viewport."""
        conic = circle_to_conic(40000, -39995, k)
        polylines = rasterize_conic(conic, ScanDomain.from_width(100))
        assert len(polylines) == 1
        xs = xs_of(polylines)
        assert min(xs) == 0
        assert 4 <= max(xs) <= 5
        for p in polylines[0]:
            assert math.hypot(p.x + 39995, p.y - k) == pytest.approx(40000.0, abs=1e-3)

    def test_huge_circle_is_not_single_valued(self):
        assert not ConicCoefficients(*circle_to_conic(40000, 0, 0)).is_single_valued

    def test_scaling_coefficients_keeps_the_curve(self):
        conic = (1.0, 0.0, 1.0, -10.0, -10.0, 29.75)
        scaled = tuple(v * 1e-12 for v in conic)
        domain = ScanDomain.from_width(10)
        expected = rasterize_conic(conic, domain)
        actual = rasterize_conic(scaled, domain)
        assert len(actual) == len(expected) == 1
        assert [p.x for p in actual[0]] == [p.x for p in expected[0]]
        for p, q in zip(actual[0], expected[0]):
            assert p.y == pytest.approx(q.y, rel=1e-9)
