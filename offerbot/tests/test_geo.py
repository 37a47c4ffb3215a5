import math

import pytest

from offerbot.geo.distance import EARTH_RADIUS_IN_METERS, GeoPoint, haversine_meters, is_area_search


def test_identical_points_are_zero_apart():
    point = GeoPoint(lat=51.5256, lon=-0.0875)
    assert haversine_meters(point, point) == 0


def test_antipodal_points_are_half_the_circumference_apart():
    a = GeoPoint(lat=0.0, lon=0.0)
    b = GeoPoint(lat=0.0, lon=180.0)
    assert haversine_meters(a, b) == pytest.approx(math.pi * EARTH_RADIUS_IN_METERS)


def test_london_to_paris():
    london = GeoPoint(lat=51.5074, lon=-0.1278)
    paris = GeoPoint(lat=48.8566, lon=2.3522)
    assert haversine_meters(london, paris) == pytest.approx(343_500, rel=0.01)


def test_nan_propagates():
    a = GeoPoint(lat=float("nan"), lon=0.0)
    b = GeoPoint(lat=0.0, lon=0.0)
    assert math.isnan(haversine_meters(a, b))


class TestAreaSearch:
    def test_missing_corner_is_not_an_area(self):
        assert not is_area_search(GeoPoint(lat=51.53, lon=-0.06), None)
        assert not is_area_search(None, None)

    def test_small_box_is_not_an_area(self):
        northeast = GeoPoint(lat=51.5262, lon=-0.0850)
        southwest = GeoPoint(lat=51.5250, lon=-0.0900)
        assert not is_area_search(northeast, southwest)

    def test_large_box_is_an_area(self):
        northeast = GeoPoint(lat=51.5350, lon=-0.0650)
        southwest = GeoPoint(lat=51.5150, lon=-0.0900)
        assert is_area_search(northeast, southwest)

    def test_threshold_is_inclusive(self):
        northeast = GeoPoint(lat=51.5262, lon=-0.0850)
        southwest = GeoPoint(lat=51.5250, lon=-0.0900)
        distance = haversine_meters(northeast, southwest)
        assert is_area_search(northeast, southwest, threshold_meters=distance)
        assert not is_area_search(northeast, southwest, threshold_meters=distance + 1)
