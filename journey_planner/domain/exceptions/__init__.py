from .routing import NoPathFound, RoutingError, UnknownStop

__all__ = ["NoPathFound", "RoutingError", "UnknownStop"]
