import pytest

from ummon.mcp.errors import (
    ResourceError,
    ResourceNotFoundError,
    ResourcePermissionError,
    ToolNotFoundError,
)
from ummon.mcp.router import Router
from ummon.mcp.types import CapabilitiesBuilder, Content, Tool


class EchoRouter(Router):
    def name(self):
        return "echo"

    def instructions(self):
        return "Use the echo tool."

    def capabilities(self):
        return CapabilitiesBuilder().with_tools(True).build()

    def list_tools(self):
        return [Tool("echo", "Echo the text back", {"type": "object"})]

    async def call_tool(self, tool_name, arguments):
        if tool_name != "echo":
            raise ToolNotFoundError(tool_name)
        return [Content.text(arguments["text"])]


def test_router_is_abstract():
    with pytest.raises(TypeError):
        Router()


def test_incomplete_subclass_cannot_be_built():
    class Partial(Router):
        def name(self):
            return "partial"

    with pytest.raises(TypeError):
        Router.__new__(Partial)


def test_default_list_resources_is_empty():
    assert Router.list_resources(EchoRouter()) == []


@pytest.mark.asyncio
async def test_default_read_resource_raises_not_found():
    with pytest.raises(ResourceNotFoundError) as info:
        await Router.read_resource(EchoRouter(), "file:///a")
    assert info.value.detail == "Resource 'file:///a' not found"
    assert str(info.value) == "Resource not found: Resource 'file:///a' not found"


@pytest.mark.asyncio
async def test_default_write_resource_raises_permission_denied():
    with pytest.raises(ResourcePermissionError) as info:
        await Router.write_resource(EchoRouter(), "file:///a", "data")
    assert info.value.detail == "Cannot write to resource 'file:///a'"
    assert isinstance(info.value, ResourceError)


@pytest.mark.asyncio
async def test_subclass_call_tool_runs():
    result = await EchoRouter().call_tool("echo", {"text": "hi"})
    assert result == [Content.text("hi")]


@pytest.mark.asyncio
async def test_subclass_call_tool_unknown_raises():
    with pytest.raises(ToolNotFoundError) as info:
        await EchoRouter().call_tool("missing", {})
    expected = ToolNotFoundError("missing")
    assert str(info.value) == str(expected)
    assert info.value.detail == "missing"


def test_subclass_description_methods():
    router = EchoRouter()
    expected = CapabilitiesBuilder().with_tools(True).build()
    assert router.name() == "echo"
    assert router.capabilities().tools is expected.tools is True
    assert router.capabilities().resources.read is expected.resources.read is False
    assert [t.name for t in router.list_tools()] == [Tool("echo", "", {}).name]