"""
Tests for tool registration: ToolBinding, FormTool, the event bus and the
FastMCP sink.
"""
import logging

import pytest
from fastmcp import FastMCP

from core.models import FieldDefinition, element
from tools.events import TOOL_ACTIVATED, TOOL_CANCEL, ToolEventBus
from tools.form_tool import FormTool
from tools.registration import FastMCPSink, SchemaTool, ToolBinding, ToolDefinition, ToolSetBinding

SCHEMA = {"type": "object", "properties": {"email": {"type": "string"}}}


class RecordingSink:
    """In-memory sink that records every call."""

    def __init__(self, fail_register=False):
        self.tools: dict[str, ToolDefinition] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_register = fail_register

    def register_tool(self, definition):
        self.calls.append(("register", definition.name))
        if self.fail_register:
            raise RuntimeError("sink rejected the tool")
        self.tools[definition.name] = definition

    def unregister_tool(self, name):
        self.calls.append(("unregister", name))
        del self.tools[name]


def _definition(execute=lambda args: "ok", **kwargs):
    return ToolDefinition(
        name=kwargs.get("name", "submit"),
        description=kwargs.get("description", "Submit the form"),
        input_schema=kwargs.get("input_schema", SCHEMA),
        execute=execute,
    )


class TestToolBinding:
    def test_first_update_registers(self):
        sink = RecordingSink()
        binding = ToolBinding(sink)
        assert binding.update(_definition()) is True
        assert sink.calls == [("register", "submit")]
        assert binding.registered_name == "submit"

    def test_unchanged_definition_is_not_re_registered(self):
        sink = RecordingSink()
        binding = ToolBinding(sink)
        binding.update(_definition())
        assert binding.update(_definition()) is False
        assert sink.calls == [("register", "submit")]

    def test_new_handler_is_used_without_re_registering(self):
        sink = RecordingSink()
        binding = ToolBinding(sink)
        binding.update(_definition(execute=lambda args: "first"))
        binding.update(_definition(execute=lambda args: "second"))
        assert len(sink.calls) == 1
        assert sink.tools["submit"].execute({}) == "second"

    def test_changed_schema_re_registers(self):
        sink = RecordingSink()
        binding = ToolBinding(sink)
        binding.update(_definition())
        assert binding.update(_definition(description="Send it")) is True
        assert sink.calls == [("register", "submit"), ("unregister", "submit"), ("register", "submit")]
        assert sink.tools["submit"].description == "Send it"

    def test_name_change_removes_old_tool(self):
        sink = RecordingSink()
        binding = ToolBinding(sink)
        binding.update(_definition(name="old_name"))
        binding.update(_definition(name="new_name"))
        assert list(sink.tools) == ["new_name"]
        assert binding.registered_name == "new_name"

    def test_close_unregisters(self):
        sink = RecordingSink()
        binding = ToolBinding(sink)
        binding.update(_definition())
        binding.close()
        assert sink.tools == {}
        assert binding.registered_name is None
        binding.close()
        assert sink.calls.count(("unregister", "submit")) == 1

    def test_sink_error_is_logged_not_raised(self, caplog):
        caplog.set_level(logging.ERROR)
        binding = ToolBinding(RecordingSink(fail_register=True))
        assert binding.update(_definition()) is False
        assert binding.registered_name is None
        assert "Failed to register tool 'submit'" in caplog.text


class TestToolEventBus:
    def test_dispatch_reaches_only_matching_tool(self):
        bus = ToolEventBus()
        seen = []
        bus.subscribe(TOOL_ACTIVATED, "submit", seen.append)
        bus.subscribe(TOOL_ACTIVATED, "other", lambda name: seen.append("wrong"))
        assert bus.dispatch(TOOL_ACTIVATED, "submit") == 1
        assert bus.dispatch(TOOL_CANCEL, "submit") == 0
        assert seen == ["submit"]

    def test_unsubscribe_is_idempotent(self):
        bus = ToolEventBus()
        seen = []
        unsubscribe = bus.subscribe(TOOL_CANCEL, "submit", seen.append)
        unsubscribe()
        unsubscribe()
        assert bus.dispatch(TOOL_CANCEL, "submit") == 0
        assert seen == []


class TestFormTool:
    def test_render_registers_compiled_schema(self):
        sink = RecordingSink()
        tool = FormTool(sink, name="contact", description="Contact us", execute=lambda args: args,
                        overrides={"email": {"description": "Recipient"}})
        schema = tool.render(element("form", None, element("input", name="email", type="email", required=True)))
        assert tool.schema is schema
        assert sink.tools["contact"].input_schema == {
            "type": "object",
            "properties": {"email": {"type": "string", "description": "Recipient"}},
            "required": ["email"],
        }

    def test_re_render_with_same_tree_does_not_re_register(self):
        sink = RecordingSink()
        tool = FormTool(sink, name="contact", description="Contact us", execute=lambda args: args)
        tool.render(element("input", name="email"))
        tool.render(element("input", name="email"))
        assert sink.calls == [("register", "contact")]

    def test_registered_field_updates_tool(self):
        sink = RecordingSink()
        tool = FormTool(sink, name="contact", description="Contact us", execute=lambda args: args)
        tree = element("input", name="email")
        tool.render(tree)
        tool.registry.register(FieldDefinition(name="topic", required=True))
        tool.render(tree)
        assert sink.tools["contact"].input_schema["required"] == ["topic"]
        assert sink.calls.count(("register", "contact")) == 2

    def test_events_and_close(self):
        sink = RecordingSink()
        bus = ToolEventBus()
        activated = []
        with FormTool(sink, name="contact", description="Contact us", execute=lambda args: args,
                      events=bus, on_activated=activated.append) as tool:
            tool.render(element("input", name="email"))
            bus.dispatch(TOOL_ACTIVATED, "contact")
        assert activated == ["contact"]
        assert sink.tools == {}
        assert bus.dispatch(TOOL_ACTIVATED, "contact") == 0


class TestFastMCP:
    @pytest.mark.asyncio
    async def test_schema_tool_runs_sync_and_async_handlers(self):
        async def async_handler(arguments):
            return f"hello {arguments['name']}"

        sync_tool = SchemaTool(name="sync", parameters=SCHEMA, handler=lambda arguments: "done")
        async_tool = SchemaTool(name="async", parameters=SCHEMA, handler=async_handler)

        assert (await sync_tool.run({})).content[0].text == "done"
        assert (await async_tool.run({"name": "Ada"})).content[0].text == "hello Ada"

    @pytest.mark.asyncio
    async def test_sink_adds_and_removes_tools(self):
        mcp = FastMCP("test")
        binding = ToolBinding(FastMCPSink(mcp))
        binding.update(ToolDefinition(
            name="submit",
            description="Submit the form",
            input_schema=SCHEMA,
            execute=lambda arguments: "ok",
            annotations={"readOnlyHint": True},
        ))

        tools = await mcp.get_tools()
        assert tools["submit"].parameters == SCHEMA
        assert tools["submit"].annotations.readOnlyHint is True

        binding.close()
        assert "submit" not in await mcp.get_tools()


class TestToolSetBinding:
    def test_registers_every_tool(self):
        sink = RecordingSink()
        tools = ToolSetBinding(sink)
        assert tools.update([_definition(name="add_todo"), _definition(name="mark_done")]) is True
        assert sorted(sink.tools) == ["add_todo", "mark_done"]
        assert tools.registered_names == ["add_todo", "mark_done"]

    def test_equal_set_is_not_re_registered(self):
        sink = RecordingSink()
        tools = ToolSetBinding(sink)
        tools.update([_definition(name="add_todo", execute=lambda args: "old")])
        assert tools.update([_definition(name="add_todo", execute=lambda args: "new")]) is False
        assert sink.calls == [("register", "add_todo")]
        assert sink.tools["add_todo"].execute({}) == "new"

    def test_replacing_the_set_drops_missing_tools(self):
        sink = RecordingSink()
        tools = ToolSetBinding(sink)
        tools.update([_definition(name="add_todo"), _definition(name="mark_done")])
        tools.update([_definition(name="mark_done"), _definition(name="archive")])
        assert sorted(sink.tools) == ["archive", "mark_done"]
        # mark_done was unchanged, so it was registered once.
        assert sink.calls.count(("register", "mark_done")) == 1

    def test_close_clears_everything(self):
        sink = RecordingSink()
        tools = ToolSetBinding(sink)
        tools.update([_definition(name="add_todo"), _definition(name="mark_done")])
        tools.close()
        assert sink.tools == {}
        assert tools.registered_names == []
        assert tools.update([_definition(name="add_todo")]) is True
