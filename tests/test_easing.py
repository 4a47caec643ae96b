"""Tests for easing functions and the easing registry"""

import pytest

from pagemotion.models.easing import (
    EASINGS,
    cubic_out,
    get_easing,
    linear,
    quad_in_out,
)


@pytest.mark.parametrize("name", sorted(EASINGS))
def test_endpoints(name):
    fn = EASINGS[name]
    assert fn(0.0) == pytest.approx(0.0)
    assert fn(1.0) == pytest.approx(1.0)


@pytest.mark.parametrize("name", sorted(EASINGS))
def test_monotonic(name):
    fn = EASINGS[name]
    samples = [fn(i / 50) for i in range(51)]
    assert samples == sorted(samples)


def test_quad_in_out_halves():
    assert quad_in_out(0.25) == pytest.approx(0.125)
    assert quad_in_out(0.5) == pytest.approx(0.5)
    assert quad_in_out(0.75) == pytest.approx(0.875)


def test_cubic_out_front_loaded():
    assert cubic_out(0.5) == pytest.approx(0.875)
    assert cubic_out(0.5) > linear(0.5)


class TestGetEasing:

    def test_by_name(self):
        assert get_easing("quad_in_out") is quad_in_out
        assert get_easing("  LINEAR ") is linear

    def test_callable_passes_through(self):
        custom = lambda t: t ** 0.5  # noqa: E731
        assert get_easing(custom) is custom

    def test_none_uses_default(self):
        assert get_easing(None) is cubic_out
        assert get_easing(None, linear) is linear

    def test_unknown_name_falls_back(self):
        assert get_easing("bounce") is cubic_out
        assert get_easing("bounce", default=linear) is linear
