"""Pydantic domain models for routes and waypoints."""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from route_sketch.core.geometry import round_km, route_distance

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]
RouteName = Annotated[str, Field(min_length=1, max_length=255)]
Distance = Annotated[float, Field(ge=0)]

MIN_PERSISTED_WAYPOINTS = 2


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: Latitude
    lng: Longitude


class Waypoint(BaseModel):
    """A point in a route. Frozen so history snapshots cannot drift."""
    model_config = ConfigDict(frozen=True)

    id: int
    lat: Latitude
    lng: Longitude
    order: int = Field(ge=0)

    @property
    def position(self) -> LatLng:
        return LatLng(lat=self.lat, lng=self.lng)


def renumber(waypoints) -> list[Waypoint]:
    """Return the waypoints with order reassigned 0..n-1 by sequence position."""
    return [
        wp if wp.order == i else wp.model_copy(update={"order": i})
        for i, wp in enumerate(waypoints)
    ]


class Route(BaseModel):
    """A stored route. Serializes with the persisted field names (user_id, ...)."""
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str
    owner: str = Field(alias="user_id")
    name: RouteName
    is_private: bool = True
    total_distance: Optional[Distance] = None
    waypoints: list[Waypoint] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", "deleted_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Records written without an offset are UTC.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("waypoints")
    @classmethod
    def order_waypoints(cls, v: list[Waypoint]) -> list[Waypoint]:
        # Array position is not authoritative; order is.
        ids = [wp.id for wp in v]
        if len(set(ids)) != len(ids):
            raise ValueError("waypoint ids must be unique within a route")
        return renumber(sorted(v, key=lambda wp: wp.order))

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class RouteDraft(BaseModel):
    """Create payload."""

    name: RouteName
    is_private: bool = True
    waypoints: Annotated[list[LatLng], Field(min_length=MIN_PERSISTED_WAYPOINTS)]
    total_distance: Optional[Distance] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class RoutePatch(BaseModel):
    """Update payload. Fields left as None are not touched."""

    name: Optional[RouteName] = None
    is_private: Optional[bool] = None
    waypoints: Optional[
        Annotated[list[LatLng], Field(min_length=MIN_PERSISTED_WAYPOINTS)]
    ] = None
    total_distance: Optional[Distance] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class RouteSummary(BaseModel):
    id: str
    name: str
    owner: str
    is_private: bool
    total_distance_km: float
    waypoint_count: int
    created_at: datetime

    @classmethod
    def from_route(cls, route: Route) -> "RouteSummary":
        distance = route.total_distance
        if distance is None:
            distance = route_distance(route.waypoints)
        return cls(
            id=route.id,
            name=route.name,
            owner=route.owner,
            is_private=route.is_private,
            total_distance_km=round_km(distance),
            waypoint_count=len(route.waypoints),
            created_at=route.created_at,
        )
