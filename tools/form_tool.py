# =============================================================================
# tools/form_tool.py  —  A UI form exposed as an agent tool
# =============================================================================
#
# WHAT THIS FILE DOES:
#   FormTool is the glue a host uses for one form:
#
#     tool = FormTool(sink, name="submit_contact", description="...",
#                     execute=handle_submit,
#                     overrides={"email": {"description": "Recipient"}})
#     tool.render(contact_form_tree)   # on every host update
#     ...
#     tool.close()                     # when the form goes away
#
#   render() runs the core engine (SchemaCollector) and pushes the compiled
#   schema to the sink through a ToolBinding, which only re-registers when
#   something an agent can see actually changed.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from core.collector import SchemaCollector
from core.merge import FieldRegistry, Partial
from tools.events import TOOL_ACTIVATED, TOOL_CANCEL, ToolEventBus, ToolEventCallback
from tools.registration import ToolBinding, ToolDefinition, ToolSink

logger = logging.getLogger(__name__)


class FormTool:
    """Keeps a sink's tool registration in step with a form's UI tree."""

    def __init__(
        self,
        sink: ToolSink,
        name: str,
        description: str,
        execute: Callable[[dict[str, Any]], Any],
        overrides: Optional[Mapping[str, Partial]] = None,
        strict: Optional[bool] = None,
        annotations: Optional[dict[str, Any]] = None,
        output_schema: Optional[dict[str, Any]] = None,
        events: Optional[ToolEventBus] = None,
        on_activated: Optional[ToolEventCallback] = None,
        on_cancel: Optional[ToolEventCallback] = None,
    ):
        self.name = name
        self.description = description
        self.execute = execute
        self.annotations = annotations
        self.output_schema = output_schema
        self.schema: Optional[dict[str, Any]] = None
        self.collector = SchemaCollector(overrides=overrides, strict=strict)
        self.binding = ToolBinding(sink)

        self._unsubscribers: list[Callable[[], None]] = []
        if events is not None:
            if on_activated is not None:
                self._unsubscribers.append(events.subscribe(TOOL_ACTIVATED, name, on_activated))
            if on_cancel is not None:
                self._unsubscribers.append(events.subscribe(TOOL_CANCEL, name, on_cancel))

    @property
    def registry(self) -> FieldRegistry:
        """Registry for fields the tree walk can't see (see core.merge.registered_fields)."""
        return self.collector.registry

    def render(self, tree: Any) -> dict[str, Any]:
        """Recompute the schema for `tree` and sync the sink; returns the schema."""
        schema = self.collector.collect(tree)
        self.schema = schema
        self.binding.update(ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=schema,
            execute=self.execute,
            output_schema=self.output_schema,
            annotations=self.annotations,
        ))
        return schema

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.binding.close()
        self.collector.close()

    def __enter__(self) -> "FormTool":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
