"""Place-name lookup via Nominatim, and latest-response-wins bookkeeping."""

import logging
import threading
from typing import Generic, Optional, TypeVar

import httpx

from route_sketch.config import Settings
from route_sketch.errors import TransientIOError
from route_sketch.models import LatLng

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def geocode(
    text: str,
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[LatLng]:
    """Resolve free text to coordinates. Returns None when nothing matches.

    Network and HTTP failures raise TransientIOError; there is no retry.
    """
    settings = settings or Settings()
    params = {"q": text, "format": "json", "limit": 1}
    headers = {"User-Agent": settings.user_agent}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.geocode_timeout) as own_client:
                response = await own_client.get(settings.nominatim_url, params=params, headers=headers)
        else:
            response = await client.get(settings.nominatim_url, params=params, headers=headers)
        response.raise_for_status()
        results = response.json()
    except httpx.HTTPStatusError as exc:
        logger.warning("Geocoder returned HTTP %s for %r", exc.response.status_code, text)
        raise TransientIOError(
            f"Geocoding service returned HTTP {exc.response.status_code}"
        ) from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoder request failed for %r: %s", text, exc)
        raise TransientIOError(f"Geocoding service unavailable: {exc}") from exc

    if not results:
        logger.info("No location found for %r", text)
        return None

    first = results[0]
    try:
        return LatLng(lat=float(first["lat"]), lng=float(first["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise TransientIOError(f"Malformed geocoding response: {exc}") from exc


class LatestWins(Generic[T]):
    """Apply a response only if it is newer than every response applied so far.

    Callers take a sequence number with ``begin()`` before issuing a lookup
    and hand the result to ``offer()``. A stale result is dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self.value: Optional[T] = None

    def begin(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def superseded(self, seq: int) -> bool:
        """True once a newer response than ``seq`` has been applied."""
        return seq < self._applied

    def offer(self, seq: int, value: Optional[T]) -> bool:
        with self._lock:
            if seq <= self._applied:
                logger.debug("Discarding stale response %d (applied %d)", seq, self._applied)
                return False
            self._applied = seq
            self.value = value
            return True
