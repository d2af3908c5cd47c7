"""Undo/redo history over a route's waypoint sequence.

The current sequence plus two stacks of snapshots (``past``, ``future``).
Every edit pushes the pre-edit sequence onto ``past`` and drops ``future``,
so history is linear: redo is lost once a new edit is made after undo.
``reset`` loads a sequence without recording anything.
"""

import itertools
import logging
import threading
from typing import Iterable, Optional

from route_sketch.models import LatLng, Waypoint, renumber

logger = logging.getLogger(__name__)

Snapshot = tuple[Waypoint, ...]


class WaypointHistory:
    def __init__(self, initial: Iterable[Waypoint] = ()):
        self._lock = threading.RLock()
        self._current: Snapshot = ()
        self._past: list[Snapshot] = []
        self._future: list[Snapshot] = []
        self._ids = itertools.count(1)
        self.reset(initial)

    @property
    def current(self) -> Snapshot:
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def past(self) -> tuple[Snapshot, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[Snapshot, ...]:
        return tuple(self._future)

    def __len__(self) -> int:
        return len(self._current)

    def _commit(self, sequence: Iterable[Waypoint]) -> None:
        self._past.append(self._current)
        self._future.clear()
        self._current = tuple(renumber(sequence))

    def _new_waypoint(self, point: LatLng, order: int) -> Waypoint:
        return Waypoint(id=next(self._ids), lat=point.lat, lng=point.lng, order=order)

    def add(self, point: LatLng) -> Waypoint:
        with self._lock:
            waypoint = self._new_waypoint(point, len(self._current))
            self._commit(self._current + (waypoint,))
            return waypoint

    def remove(self, waypoint_id: int) -> bool:
        """Remove a waypoint. Returns False (and records nothing) if absent."""
        with self._lock:
            remaining = [wp for wp in self._current if wp.id != waypoint_id]
            if len(remaining) == len(self._current):
                return False
            self._commit(remaining)
            return True

    def move(self, waypoint_id: int, point: LatLng) -> bool:
        with self._lock:
            if not any(wp.id == waypoint_id for wp in self._current):
                return False
            self._commit(
                wp.model_copy(update={"lat": point.lat, "lng": point.lng})
                if wp.id == waypoint_id else wp
                for wp in self._current
            )
            return True

    def replace(self, points: Iterable[LatLng]) -> None:
        """Swap in a whole new sequence as a single undoable edit."""
        with self._lock:
            self._commit(self._new_waypoint(p, i) for i, p in enumerate(points))

    def clear(self) -> None:
        with self._lock:
            self._commit(())

    def reset(self, sequence: Iterable[Waypoint] = ()) -> None:
        """Load a sequence without history; both stacks are emptied."""
        with self._lock:
            ordered = sorted(sequence, key=lambda wp: wp.order)
            self._current = tuple(renumber(ordered))
            self._past.clear()
            self._future.clear()
            next_id = max((wp.id for wp in self._current), default=0) + 1
            self._ids = itertools.count(next_id)

    def undo(self) -> bool:
        with self._lock:
            if not self._past:
                return False
            self._future.insert(0, self._current)
            self._current = self._past.pop()
            return True

    def redo(self) -> bool:
        with self._lock:
            if not self._future:
                return False
            self._past.append(self._current)
            self._current = self._future.pop(0)
            return True

    def find(self, waypoint_id: int) -> Optional[Waypoint]:
        return next((wp for wp in self._current if wp.id == waypoint_id), None)

    def positions(self) -> list[LatLng]:
        return [wp.position for wp in self._current]

    def summary(self) -> dict:
        return {
            "waypoints": len(self._current),
            "undo_steps": len(self._past),
            "redo_steps": len(self._future),
        }
