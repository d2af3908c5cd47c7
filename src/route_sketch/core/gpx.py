"""GPX import and export."""

import gpxpy
import gpxpy.gpx

from route_sketch.errors import RouteValidationError
from route_sketch.models import LatLng, Route


def parse_gpx_points(filepath: str) -> list[LatLng]:
    """Read a GPX file into an ordered list of points.

    Track points are used if present, then route points, then bare waypoints.
    """
    with open(filepath, "r") as f:
        try:
            gpx = gpxpy.parse(f)
        except gpxpy.gpx.GPXException as exc:
            raise RouteValidationError(str(exc), field="gpx") from exc

    candidates = [
        [p for track in gpx.tracks for segment in track.segments for p in segment.points],
        [p for route in gpx.routes for p in route.points],
        list(gpx.waypoints),
    ]
    for points in candidates:
        if points:
            return [LatLng(lat=p.latitude, lng=p.longitude) for p in points]
    return []


def route_to_gpx(route: Route) -> str:
    gpx = gpxpy.gpx.GPX()
    gpx.creator = "route-sketch"
    gpx_route = gpxpy.gpx.GPXRoute(name=route.name)
    for wp in route.waypoints:
        gpx_route.points.append(
            gpxpy.gpx.GPXRoutePoint(latitude=wp.lat, longitude=wp.lng, name=str(wp.order))
        )
    gpx.routes.append(gpx_route)
    return gpx.to_xml()
