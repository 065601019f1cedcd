import pytest

from shelter_match.engine.geo import haversine_miles


def test_same_point_is_zero():
    assert haversine_miles(40.7128, -74.0060, 40.7128, -74.0060) == pytest.approx(0.0, abs=1e-9)


def test_new_york_to_los_angeles():
    miles = haversine_miles(40.7128, -74.0060, 34.0522, -118.2437)
    assert miles == pytest.approx(2445.6, rel=0.005)


def test_symmetric_and_non_negative():
    there = haversine_miles(51.5074, -0.1278, 48.8566, 2.3522)
    back = haversine_miles(48.8566, 2.3522, 51.5074, -0.1278)
    assert there == pytest.approx(back)
    assert there > 0


def test_antipodal_points():
    miles = haversine_miles(0, 0, 0, 180)
    assert miles == pytest.approx(3958.8 * 3.141592653589793, rel=1e-6)
