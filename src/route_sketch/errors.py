"""Error taxonomy for route-sketch.

Tools catch these and report ``Error: ...`` strings; core code raises them.
"""


class RouteError(Exception):
    """Base class for all route-sketch errors."""


class RouteValidationError(RouteError, ValueError):
    """Input rejected before any persistence attempt."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


class AuthorizationError(RouteError):
    """The visibility policy denied the requested capability."""

    def __init__(self, capability: str, route_id: str):
        self.capability = capability
        self.route_id = route_id
        super().__init__(f"Not allowed to {capability} route {route_id}")


class NotFoundError(RouteError):
    """Unknown or soft-deleted route id."""

    def __init__(self, route_id: str):
        self.route_id = route_id
        super().__init__(f"Route {route_id} not found")


class TransientIOError(RouteError):
    """Geocoding or storage I/O failed. Reported to the caller, never retried."""
