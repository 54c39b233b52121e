"""Protocol types, errors and the router interface of the tool server."""

__all__ = ["errors", "types", "router"]