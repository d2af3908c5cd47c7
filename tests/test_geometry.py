"""Tests for haversine distance and route length."""
import numpy as np
import pytest

from route_sketch.core.geometry import (
    distance_between,
    distances_from,
    round_km,
    route_distance,
    within_km,
)
from route_sketch.models import LatLng, Waypoint

MANILA_A = LatLng(lat=14.5995, lng=120.9842)
MANILA_B = LatLng(lat=14.6000, lng=120.9850)


def _wps(*coords):
    return [Waypoint(id=i + 1, lat=lat, lng=lng, order=i) for i, (lat, lng) in enumerate(coords)]


def test_distance_to_self_is_zero():
    assert distance_between(MANILA_A, MANILA_A) == 0.0


def test_distance_is_symmetric():
    assert distance_between(MANILA_A, MANILA_B) == pytest.approx(distance_between(MANILA_B, MANILA_A))


def test_one_degree_of_latitude():
    a = LatLng(lat=0.0, lng=0.0)
    b = LatLng(lat=1.0, lng=0.0)
    assert distance_between(a, b) == pytest.approx(111.195, abs=0.01)


def test_antipodes_are_half_circumference():
    a = LatLng(lat=0.0, lng=0.0)
    b = LatLng(lat=0.0, lng=180.0)
    assert distance_between(a, b) == pytest.approx(np.pi * 6371.0, rel=1e-9)


def test_manila_pair_distance():
    wps = _wps((14.5995, 120.9842), (14.6000, 120.9850))
    assert route_distance(wps) == pytest.approx(0.1025, abs=0.001)
    assert round_km(route_distance(wps)) == 0.10


def test_route_distance_empty_and_single_are_zero():
    assert route_distance([]) == 0.0
    assert route_distance(_wps((10.0, 10.0))) == 0.0


def test_route_distance_sums_legs_in_order():
    wps = _wps((0.0, 0.0), (0.0, 1.0), (1.0, 1.0))
    expected = distance_between(wps[0], wps[1]) + distance_between(wps[1], wps[2])
    assert route_distance(wps) == pytest.approx(expected)
    assert route_distance(wps) >= 0


def test_route_distance_follows_order_not_list_position():
    wps = _wps((0.0, 0.0), (0.0, 1.0), (1.0, 1.0))
    shuffled = [wps[2], wps[0], wps[1]]
    assert route_distance(shuffled) == pytest.approx(route_distance(wps))


def test_route_distance_is_not_rounded_internally():
    wps = _wps(*[(0.0, i * 0.00123) for i in range(50)])
    legs = sum(distance_between(a, b) for a, b in zip(wps, wps[1:]))
    assert route_distance(wps) == pytest.approx(legs, rel=1e-12)


def test_distances_from_matches_scalar():
    lats = np.array([14.6000, 0.0])
    lngs = np.array([120.9850, 0.0])
    result = distances_from(MANILA_A, lats, lngs)
    assert result[0] == pytest.approx(distance_between(MANILA_A, MANILA_B))
    assert result[1] == pytest.approx(distance_between(MANILA_A, LatLng(lat=0, lng=0)))


def test_within_km():
    near = LatLng(lat=14.62, lng=120.9842)   # ~2.3 km north
    far = LatLng(lat=14.70, lng=120.9842)    # ~11 km north
    assert within_km(MANILA_A, [far, near], 5.0) is True
    assert within_km(MANILA_A, [far], 5.0) is False
    assert within_km(MANILA_A, [], 5.0) is False
