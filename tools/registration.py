# =============================================================================
# tools/registration.py  —  Registration sink adapters
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Hands compiled schemas to whatever actually exposes tools to an agent.
#   The engine in core/ only produces `inputSchema`; everything else in a
#   ToolDefinition (name, description, annotations, execute) passes through
#   untouched.
#
#   ToolSink      → the interface: register_tool(definition) / unregister_tool(name)
#   FastMCPSink   → a ToolSink backed by a FastMCP server
#   ToolBinding   → keeps ONE tool registered with a sink, re-registering
#                   only when the tool's fingerprint changes
#   ToolSetBinding → keeps a whole SET of tools registered, replacing the set
#                   when any member changes and clearing it on close
#
# THE EXECUTE HANDLER:
#   Hosts tend to pass a brand-new handler on every update.  ToolBinding
#   registers a trampoline that always calls the LATEST handler, so handler
#   churn never forces a re-registration (and is never fingerprinted).
# =============================================================================

import inspect
import logging
from dataclasses import dataclass, replace
from collections.abc import Iterable
from typing import Any, Callable, Optional, Protocol

from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import ToolAnnotations

from core.config import LOG_PREFIX
from core.fingerprint import fingerprint_tool

logger = logging.getLogger(__name__)


@dataclass
class ToolDefinition:
    """Everything a sink needs to expose one tool."""

    name: str
    description: str
    input_schema: dict[str, Any]
    execute: Callable[[dict[str, Any]], Any]
    output_schema: Optional[dict[str, Any]] = None
    annotations: Optional[dict[str, Any]] = None


class ToolSink(Protocol):
    def register_tool(self, definition: ToolDefinition) -> None: ...

    def unregister_tool(self, name: str) -> None: ...


# =============================================================================
# FastMCP adapter
# =============================================================================
class SchemaTool(Tool):
    """A FastMCP tool whose parameters come from a compiled schema."""

    handler: Callable[[dict[str, Any]], Any]

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        result = self.handler(arguments)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, ToolResult):
            return result
        return ToolResult(content=result if result is not None else "")


class FastMCPSink:
    """Registers ToolDefinitions on a FastMCP server."""

    def __init__(self, server: FastMCP):
        self.server = server

    def register_tool(self, definition: ToolDefinition) -> None:
        annotations = definition.annotations
        if isinstance(annotations, dict):
            annotations = ToolAnnotations(**annotations)
        self.server.add_tool(SchemaTool(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema,
            output_schema=definition.output_schema,
            annotations=annotations,
            handler=definition.execute,
        ))

    def unregister_tool(self, name: str) -> None:
        self.server.remove_tool(name)


# =============================================================================
# ToolBinding
# =============================================================================
class ToolBinding:
    """Keeps one tool registered with a sink, in step with its definition."""

    def __init__(self, sink: ToolSink):
        self.sink = sink
        self._definition: Optional[ToolDefinition] = None
        self._registered_name: Optional[str] = None
        self._fingerprint: Optional[str] = None

    @property
    def registered_name(self) -> Optional[str]:
        return self._registered_name

    def _execute(self, arguments: dict[str, Any]) -> Any:
        return self._definition.execute(arguments)

    def _unregister(self, name: str) -> None:
        try:
            self.sink.unregister_tool(name)
        except Exception as e:
            # Already gone (removed externally, or never made it in).
            logger.debug("Unregistering tool %r failed: %s", name, e)

    def update(self, definition: ToolDefinition) -> bool:
        """Register `definition` if it differs from what the sink has.

        Returns:
            True if the sink was (re-)registered, False if nothing changed
            or the sink refused the tool (which is logged, not raised).
        """
        self._definition = definition
        fp = fingerprint_tool(definition)
        if fp == self._fingerprint and self._registered_name == definition.name:
            return False

        if self._registered_name is not None:
            self._unregister(self._registered_name)
            self._registered_name = None
            self._fingerprint = None

        try:
            self.sink.register_tool(replace(definition, execute=self._execute))
        except Exception:
            logger.exception("%s Failed to register tool %r", LOG_PREFIX, definition.name)
            return False

        self._registered_name = definition.name
        self._fingerprint = fp
        logger.info("Registered tool %r", definition.name)
        return True

    def close(self) -> None:
        """Unregister the tool, if registered."""
        if self._registered_name is not None:
            self._unregister(self._registered_name)
            logger.info("Unregistered tool %r", self._registered_name)
        self._registered_name = None
        self._fingerprint = None


class ToolSetBinding:
    """Keeps a set of tools registered with a sink, replaced as a whole.

    Use it when the tools an agent should see depend on application state:
    pass the full list on every update, and tools missing from the new list
    are unregistered.
    """

    def __init__(self, sink: ToolSink):
        self.sink = sink
        self._bindings: dict[str, ToolBinding] = {}
        self._fingerprint: Optional[str] = None

    @property
    def registered_names(self) -> list[str]:
        return sorted(name for name, binding in self._bindings.items() if binding.registered_name is not None)

    def update(self, definitions: Iterable[ToolDefinition]) -> bool:
        """Make the sink hold exactly `definitions`.

        Returns:
            True if the set changed, False if only handlers were refreshed.
        """
        definitions = list(definitions)
        fp = "\n".join(fingerprint_tool(d) for d in definitions)
        changed = fp != self._fingerprint

        if changed:
            wanted = {d.name for d in definitions}
            for name in [n for n in self._bindings if n not in wanted]:
                self._bindings.pop(name).close()

        # Unchanged bindings skip the sink and only pick up the new handler.
        for definition in definitions:
            binding = self._bindings.get(definition.name)
            if binding is None:
                binding = self._bindings[definition.name] = ToolBinding(self.sink)
            binding.update(definition)

        self._fingerprint = fp
        if changed:
            logger.info("Tool set now: %s", self.registered_names)
        return changed

    def close(self) -> None:
        """Unregister every tool in the set."""
        for binding in self._bindings.values():
            binding.close()
        self._bindings.clear()
        self._fingerprint = None
