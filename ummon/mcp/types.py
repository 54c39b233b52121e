"""JSON-RPC and tool-protocol message types with their dict forms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR_START = -32000
SERVER_ERROR_END = -32099


def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be an object")
    return data


def _field(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _typed(data: Mapping[str, Any], key: str, kind: type) -> Any:
    value = _field(data, key)
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"field {key!r} must be of type {kind.__name__}")
    return value


def _optional(data: Mapping[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"field {key!r} must be of type {kind.__name__}")
    return value


@dataclass
class JsonRpcRequest:
    """A JSON-RPC request."""

    jsonrpc: str
    id: Any
    method: str
    params: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JsonRpcRequest:
        data = _mapping(data, "request")
        return cls(
            jsonrpc=_typed(data, "jsonrpc", str),
            id=_field(data, "id"),
            method=_typed(data, "method", str),
            params=data.get("params"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }


@dataclass
class JsonRpcError:
    """The error member of a JSON-RPC response."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JsonRpcError:
        data = _mapping(data, "error")
        return cls(
            code=_typed(data, "code", int),
            message=_typed(data, "message", str),
            data=data.get("data"),
        )


@dataclass
class JsonRpcResponse:
    """A JSON-RPC response carrying either a result or an error."""

    jsonrpc: str
    id: Any
    result: Any = None
    error: JsonRpcError | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.result is not None:
            out["result"] = self.result
        if self.error is not None:
            out["error"] = self.error.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JsonRpcResponse:
        data = _mapping(data, "response")
        error = data.get("error")
        return cls(
            jsonrpc=_typed(data, "jsonrpc", str),
            id=_field(data, "id"),
            result=data.get("result"),
            error=None if error is None else JsonRpcError.from_dict(error),
        )


@dataclass(frozen=True)
class CapabilityLevel:
    """Read and write permissions for resources."""

    read: bool = False
    write: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {"read": self.read, "write": self.write}


@dataclass(frozen=True)
class ServerCapabilities:
    """What a server offers: tools and resource access."""

    tools: bool
    resources: CapabilityLevel

    def to_dict(self) -> dict[str, Any]:
        return {"tools": self.tools, "resources": self.resources.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServerCapabilities:
        data = _mapping(data, "capabilities")
        resources = _mapping(_field(data, "resources"), "resources")
        return cls(
            tools=_typed(data, "tools", bool),
            resources=CapabilityLevel(
                read=_typed(resources, "read", bool),
                write=_typed(resources, "write", bool),
            ),
        )


class CapabilitiesBuilder:
    """Fluent builder for ``ServerCapabilities``; everything is off by default."""

    def __init__(self) -> None:
        self._tools = False
        self._read = False
        self._write = False

    def with_tools(self, tools: bool) -> CapabilitiesBuilder:
        self._tools = tools
        return self

    def with_resources(self, read: bool, write: bool) -> CapabilitiesBuilder:
        self._read = read
        self._write = write
        return self

    def build(self) -> ServerCapabilities:
        return ServerCapabilities(
            tools=self._tools,
            resources=CapabilityLevel(read=self._read, write=self._write),
        )


@dataclass
class Tool:
    """A tool the server exposes, with its argument schema."""

    name: str
    description: str
    schema: Any

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "schema": self.schema}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Tool:
        data = _mapping(data, "tool")
        return cls(
            name=_typed(data, "name", str),
            description=_typed(data, "description", str),
            schema=_field(data, "schema"),
        )


@dataclass
class Resource:
    """A resource the server exposes."""

    uri: str
    name: str
    description: str
    writeable: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
        }
        if self.writeable is not None:
            out["writeable"] = self.writeable
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Resource:
        data = _mapping(data, "resource")
        return cls(
            uri=_typed(data, "uri", str),
            name=_typed(data, "name", str),
            description=_typed(data, "description", str),
            writeable=_optional(data, "writeable", bool),
        )


_CONTENT_KINDS = ("text", "image", "json")


@dataclass(frozen=True)
class Content:
    """A piece of tool output: text, an image reference or a JSON value.

    ``payload`` holds the text, the image URL or the JSON value; ``alt`` is
    used by images only.
    """

    kind: str
    payload: Any
    alt: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in _CONTENT_KINDS:
            raise ValueError(f"unknown content kind: {self.kind!r}")
        if self.kind != "image" and self.alt is not None:
            raise ValueError("only image content has alt text")

    @classmethod
    def text(cls, content: str) -> Content:
        return cls("text", str(content))

    @classmethod
    def image(cls, url: str, alt: str | None = None) -> Content:
        return cls("image", str(url), None if alt is None else str(alt))

    @classmethod
    def json(cls, value: Any) -> Content:
        return cls("json", value)

    def to_dict(self) -> dict[str, Any]:
        if self.kind == "image":
            body: dict[str, Any] = {"url": self.payload}
            if self.alt is not None:
                body["alt"] = self.alt
            return {"type": "image", "content": body}
        return {"type": self.kind, "content": self.payload}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Content:
        data = _mapping(data, "content")
        kind = _typed(data, "type", str)
        if kind == "text":
            return cls.text(_typed(data, "content", str))
        if kind == "image":
            body = _mapping(_field(data, "content"), "image content")
            return cls.image(_typed(body, "url", str), _optional(body, "alt", str))
        if kind == "json":
            return cls.json(_field(data, "content"))
        raise ValueError(f"unknown content type: {kind!r}")


@dataclass
class InitializeParams:
    """Parameters of the initialize request."""

    timeout_ms: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {} if self.timeout_ms is None else {"timeout_ms": self.timeout_ms}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InitializeParams:
        data = _mapping(data, "initialize params")
        timeout = _optional(data, "timeout_ms", int)
        if timeout is not None and timeout < 0:
            raise ValueError("timeout_ms must not be negative")
        return cls(timeout_ms=timeout)


@dataclass
class InitializeResult:
    """Result of the initialize request."""

    name: str
    instructions: str
    capabilities: ServerCapabilities

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "instructions": self.instructions,
            "capabilities": self.capabilities.to_dict(),
        }


@dataclass
class ToolCallParams:
    """Parameters of a tool call."""

    name: str
    arguments: Any

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ToolCallParams:
        data = _mapping(data, "tool call params")
        return cls(name=_typed(data, "name", str), arguments=_field(data, "arguments"))


@dataclass
class ToolCallResult:
    """Result of a tool call."""

    content: list[Content] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"content": [c.to_dict() for c in self.content]}