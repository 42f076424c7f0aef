"""Tests for root evaluation and branch scanning."""

import math

import pytest

from conics.geometry import kernels
from conics.geometry.conversion import circle_to_conic
from conics.geometry.primitives import (
    ROOT_NEGATIVE, ROOT_POSITIVE, ConicCoefficients, ScanDomain,
)
from conics.tracer.scan import evaluate_y, find_extent, last_x, scan_branch


CIRCLE_R2 = ConicCoefficients(1.0, 0.0, 1.0, 0.0, 0.0, -4.0)


class TestEvaluateY:
    """Test the per-x root evaluator."""

    @pytest.mark.parametrize("x", [-1.5, 0.0, 1.0, 2.25])
    def test_roots_satisfy_vieta(self, x):
        """Sum and product of the two roots match the quadratic in y."""
        conic = ConicCoefficients(1.0, 0.5, 2.0, -3.0, 1.0, -4.0)
        a, b, c, d, e, f = conic
        yp = evaluate_y(x, conic, ROOT_POSITIVE)
        yn = evaluate_y(x, conic, ROOT_NEGATIVE)
        assert yp is not None and yn is not None
        assert yp + yn == pytest.approx(-(b * x + e) / c)
        assert yp * yn == pytest.approx((a * x * x + d * x + f) / c)

    def test_positive_root_is_larger_when_c_positive(self):
        assert evaluate_y(0.0, CIRCLE_R2, ROOT_POSITIVE) == pytest.approx(2.0)
        assert evaluate_y(0.0, CIRCLE_R2, ROOT_NEGATIVE) == pytest.approx(-2.0)

    def test_linear_case_single_root(self):
        """With C = 0 both signs give the same value: y = x²."""
        conic = ConicCoefficients(1.0, 0.0, 0.0, 0.0, -1.0, 0.0)
        assert evaluate_y(3.0, conic, ROOT_POSITIVE) == pytest.approx(9.0)
        assert evaluate_y(3.0, conic, ROOT_NEGATIVE) == pytest.approx(9.0)

    def test_no_real_value_outside_circle(self):
        assert evaluate_y(2.5, CIRCLE_R2, ROOT_POSITIVE) is None
        assert evaluate_y(-3.0, CIRCLE_R2, ROOT_NEGATIVE) is None

    def test_no_value_when_linear_term_vanishes(self):
        """x² - x = 0 has no y coefficient at all."""
        conic = ConicCoefficients(1.0, 0.0, 0.0, -1.0, 0.0, 0.0)
        assert evaluate_y(1.0, conic, ROOT_POSITIVE) is None

    def test_tangent_point_is_valid(self):
        assert evaluate_y(2.0, CIRCLE_R2, ROOT_POSITIVE) == pytest.approx(0.0)

    def test_invalid_root_sign(self):
        with pytest.raises(ValueError):
            evaluate_y(0.0, CIRCLE_R2, 0)

    def test_kernel_reports_ok_flag(self):
        y, ok = kernels.conic_y(5.0, 1.0, 0.0, 1.0, 0.0, 0.0, -4.0, 1)
        assert not ok
        y, ok = kernels.conic_y(0.0, 1.0, 0.0, 1.0, 0.0, 0.0, -4.0, -1)
        assert ok
        assert y == pytest.approx(-2.0)

    def test_small_root_keeps_precision(self):
        """1e-12·y² + y - 1 = 0: the root near 1 must not lose digits to cancellation."""
        conic = ConicCoefficients(0.0, 0.0, 1e-12, 0.0, 1.0, -1.0)
        assert evaluate_y(0.0, conic, ROOT_POSITIVE) == pytest.approx(1.0, rel=1e-9)
        assert evaluate_y(0.0, conic, ROOT_NEGATIVE) == pytest.approx(-1e12, rel=1e-9)

    def test_huge_circle_is_quadratic(self):
        """Coefficients divided by r² are tiny, but C is not negligible next to A."""
        conic = circle_to_conic(40000, -39995, 0)
        expected = math.sqrt(40000.0 ** 2 - 39995.0 ** 2)
        assert evaluate_y(0.0, conic, ROOT_POSITIVE) == pytest.approx(expected, rel=1e-6)
        assert evaluate_y(0.0, conic, ROOT_NEGATIVE) == pytest.approx(-expected, rel=1e-6)


class TestScanBranch:
    """Test lazy unit-step scanning."""

    def test_stops_at_first_invalid_sample(self):
        xs = [p.x for p in scan_branch(CIRCLE_R2, -2, 5, ROOT_NEGATIVE)]
        assert xs == [-2, -1, 0, 1, 2]

    def test_scans_downwards(self):
        points = list(scan_branch(CIRCLE_R2, 2, -5, ROOT_POSITIVE))
        assert [p.x for p in points] == [2, 1, 0, -1, -2]
        assert all(p.y >= 0 for p in points)

    def test_empty_when_start_is_invalid(self):
        assert list(scan_branch(CIRCLE_R2, 3, 8, ROOT_NEGATIVE)) == []

    def test_empty_range(self):
        assert list(scan_branch(CIRCLE_R2, 0, 0, ROOT_NEGATIVE)) == []

    def test_generator_can_be_restarted(self):
        first = list(scan_branch(CIRCLE_R2, -2, 3, ROOT_NEGATIVE))
        second = list(scan_branch(CIRCLE_R2, -2, 3, ROOT_NEGATIVE))
        assert first == second


class TestFindExtent:
    """Test the visible x range of a conic."""

    def test_circle_extent(self):
        assert find_extent(CIRCLE_R2, ScanDomain(-10, 10)) == (-2, 2)

    def test_extent_clamped_to_domain(self):
        assert find_extent(CIRCLE_R2, ScanDomain(0, 10)) == (0, 2)

    def test_invisible_curve(self):
        assert find_extent(CIRCLE_R2, ScanDomain(5, 10)) is None

    def test_empty_domain(self):
        assert find_extent(CIRCLE_R2, ScanDomain(0, 0)) is None

    def test_last_x(self):
        points = list(scan_branch(CIRCLE_R2, -2, 3, ROOT_NEGATIVE))
        assert last_x(points, 99) == 2
        assert last_x([], 99) == 99
