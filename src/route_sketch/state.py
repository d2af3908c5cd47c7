"""Session state for the route-sketch MCP server.

Holds who is signed in, the route being edited (with its undo history), and
the most recent geocoding result. One ``SessionState`` is built per server
process and handed to each tool group.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .config import Settings
from .core.geocode import LatestWins
from .core.geometry import round_km, route_distance
from .core.history import WaypointHistory
from .models import LatLng, Route
from .store import RouteStore


class Principal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    # Opaque bearer credential; passed through, never inspected.
    credential: Optional[SecretStr] = None


class EditSession(BaseModel):
    """An in-progress edit. ``route_id`` is None for a route not yet saved."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    route_id: Optional[str] = None
    name: str = ""
    is_private: bool = True
    history: WaypointHistory = Field(default_factory=WaypointHistory)

    @classmethod
    def for_route(cls, route: Route) -> "EditSession":
        return cls(
            route_id=route.id,
            name=route.name,
            is_private=route.is_private,
            history=WaypointHistory(route.waypoints),
        )

    @property
    def distance_km(self) -> float:
        return route_distance(self.history.current)

    def summary(self) -> dict:
        return {
            "route_id": self.route_id,
            "name": self.name,
            "is_private": self.is_private,
            "distance_km": round_km(self.distance_km),
            "can_undo": self.history.can_undo,
            "can_redo": self.history.can_redo,
            **self.history.summary(),
        }


class SessionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: Settings = Field(default_factory=Settings)
    store: RouteStore = Field(default_factory=RouteStore)
    principal: Optional[Principal] = None
    editor: Optional[EditSession] = None
    map_center: LatestWins = Field(default_factory=LatestWins)
    route_search: LatestWins = Field(default_factory=LatestWins)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionState":
        state = cls(settings=settings, store=RouteStore(settings.store_path))
        if settings.principal:
            state.principal = Principal(id=settings.principal)
        return state

    @property
    def principal_id(self) -> Optional[str]:
        return self.principal.id if self.principal else None

    def summary(self) -> dict:
        center: Optional[LatLng] = self.map_center.value
        return {
            "principal": self.principal_id,
            "store": str(self.store.path) if self.store.path else "memory",
            "editor": self.editor.summary() if self.editor else None,
            "map_center": center.model_dump() if center else None,
        }
