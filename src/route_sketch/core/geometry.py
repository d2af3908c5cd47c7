"""Great-circle distance and cumulative route length.

All values are kilometers. Nothing here rounds; call ``round_km`` only when
presenting a value.
"""

import math
from typing import Iterable, Sequence

import numpy as np

EARTH_RADIUS_KM = 6371.0
DISPLAY_PRECISION = 2


def distance_between(a, b) -> float:
    """Haversine distance in km between two objects with ``lat``/``lng``."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlmb = math.radians(b.lng - a.lng)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def route_distance(waypoints: Sequence) -> float:
    """Sum of leg distances in traversal order. 0 for fewer than 2 points."""
    if len(waypoints) < 2:
        return 0.0
    if all(hasattr(wp, "order") for wp in waypoints):
        waypoints = sorted(waypoints, key=lambda wp: wp.order)
    total = 0.0
    for prev, cur in zip(waypoints[:-1], waypoints[1:]):
        total += distance_between(prev, cur)
    return total


def distances_from(origin, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    """Vectorized haversine from ``origin`` to each (lat, lng) pair, in km."""
    lat1 = math.radians(origin.lat)
    lat2 = np.radians(lats)
    dphi = lat2 - lat1
    dlmb = np.radians(lngs) - math.radians(origin.lng)

    h = np.sin(dphi / 2) ** 2 + math.cos(lat1) * np.cos(lat2) * np.sin(dlmb / 2) ** 2
    h = np.clip(h, 0.0, 1.0)
    return 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def within_km(origin, points: Iterable, radius_km: float) -> bool:
    """True if any point lies within ``radius_km`` of ``origin``."""
    points = list(points)
    if not points:
        return False
    lats = np.array([p.lat for p in points], dtype=float)
    lngs = np.array([p.lng for p in points], dtype=float)
    return bool(np.any(distances_from(origin, lats, lngs) <= radius_km))


def round_km(value: float) -> float:
    return round(value, DISPLAY_PRECISION)
