"""Errors raised by tools, resources, transports and the server."""

from __future__ import annotations

from typing import ClassVar


class _DescribedError(Exception):
    """An error carrying a detail string, shown after a fixed prefix."""

    prefix: ClassVar[str] = ""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.prefix}: {self.detail}"
        return self.detail


class ToolError(_DescribedError):
    """Failure while looking up or running a tool."""


class ToolNotFoundError(ToolError):
    prefix = "Tool not found"


class InvalidToolParamsError(ToolError):
    prefix = "Invalid parameters"


class ToolExecutionError(ToolError):
    prefix = "Execution failed"


class ToolInternalError(ToolError):
    prefix = "Internal error"


class ResourceError(_DescribedError):
    """Failure while reading or writing a resource."""


class ResourceNotFoundError(ResourceError):
    prefix = "Resource not found"


class ResourcePermissionError(ResourceError):
    prefix = "Permission denied"


class InvalidResourceError(ResourceError):
    prefix = "Invalid resource"


class ResourceInternalError(ResourceError):
    prefix = "Internal error"


class TransportError(_DescribedError):
    """Failure in the message transport."""


class TransportParseError(TransportError):
    prefix = "Parse error"


class TransportIoError(TransportError):
    """An I/O failure of the underlying stream."""

    prefix = "I/O error"

    def __init__(self, error: OSError | str) -> None:
        super().__init__(str(error))
        self.error = error
        if isinstance(error, BaseException):
            self.__cause__ = error


class InvalidJsonRpcError(TransportError):
    prefix = "Invalid JSON-RPC"


class TransportInternalError(TransportError):
    prefix = "Internal error"


class ServerError(_DescribedError):
    """Failure while serving requests."""


class ServerTransportError(ServerError):
    """A transport failure surfacing at the server."""

    prefix = "Transport error"

    def __init__(self, error: TransportError) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error


class RouterError(ServerError):
    prefix = "Router error"


class MethodNotFoundError(ServerError):
    prefix = "Method not found"


class InvalidServerParamsError(ServerError):
    prefix = "Invalid params"