class RoutingError(Exception):
    """Base exception for journey planning failures."""


class NoPathFound(RoutingError):
    """Raised when no feasible path exists for the given request."""


class UnknownStop(RoutingError):
    """Raised when a stop id is not part of the network graph."""
