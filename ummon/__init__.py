"""Knowledge graph of code entities and the core types of a tool server."""

__version__ = "0.1.0"