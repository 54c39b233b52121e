"""The interface a server uses to answer tool and resource requests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ummon.mcp.errors import ResourceNotFoundError, ResourcePermissionError
from ummon.mcp.types import Content, Resource, ServerCapabilities, Tool


class Router(ABC):
    """Handles requests for a server: describes it and runs its tools.

    Resource support is optional; by default there are no resources, reading
    raises ``ResourceNotFoundError`` and writing raises
    ``ResourcePermissionError``.
    """

    @abstractmethod
    def name(self) -> str:
        """Name of the server."""

    @abstractmethod
    def instructions(self) -> str:
        """Instructions for the agent using the server."""

    @abstractmethod
    def capabilities(self) -> ServerCapabilities:
        """What the server offers."""

    @abstractmethod
    def list_tools(self) -> list[Tool]:
        """The tools the server exposes."""

    @abstractmethod
    async def call_tool(self, tool_name: str, arguments: Any) -> list[Content]:
        """Run a tool; raises a ``ToolError`` on failure."""

    def list_resources(self) -> list[Resource]:
        return []

    async def read_resource(self, uri: str) -> str:
        raise ResourceNotFoundError(f"Resource '{uri}' not found")

    async def write_resource(self, uri: str, content: str) -> None:
        raise ResourcePermissionError(f"Cannot write to resource '{uri}'")