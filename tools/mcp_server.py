# =============================================================================
# tools/mcp_server.py  —  FastMCP demo server (forms exposed as tools)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Turns the demo forms in core/forms.py into MCP tools.  No tool here has
#   a hand-written schema: each one's inputSchema is compiled by the core
#   engine from the form's UI tree, its override map and any explicitly
#   declared fields, then registered through FormTool → ToolBinding →
#   FastMCPSink.
#
# HOW IT WORKS (the flow):
#   1. build_server() creates the FastMCP instance
#   2. For each demo form, a FormTool registers its declared fields and
#      renders the tree; the compiled schema is pushed to FastMCP
#   3. An agent lists tools and sees ordinary JSON Schema parameters
#   4. A call is routed to the form's execute handler below
#
# RUNNING THIS SERVER:
#     python -m tools.mcp_server
#   The demo agent (agent/form_agent.py) starts it over stdio.
# =============================================================================

import hashlib
import json
import logging
import sys
from typing import Any, Callable

from fastmcp import FastMCP

from core.config import log_level
from core.flights import search_flights
from core.forms import get_form, list_available_forms
from tools.form_tool import FormTool
from tools.registration import FastMCPSink

# =============================================================================
# Logging Setup
# =============================================================================
# Log to STDERR: STDOUT carries the MCP protocol when running over stdio,
# and a stray log line there corrupts the message stream.
#
#   CYAN   → incoming tool calls
#   GREEN  → responses
#   YELLOW → status / progress
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger(__name__)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: Any) -> Any:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logger.info(f"{_GREEN}  ← {tool_name} response: {json.dumps(result, separators=(',', ':'))}{_RESET}")
    return result


# =============================================================================
# Execute handlers
# =============================================================================
def _submit_contact(arguments: dict[str, Any]) -> str:
    _log_request("submit_contact", **arguments)
    text = (
        f"Contact submitted: {arguments.get('name')} ({arguments.get('email')}) — "
        f"{arguments.get('subject')}: {arguments.get('message')}"
    )
    return _log_response("submit_contact", text)


def _search_flights(arguments: dict[str, Any]) -> Any:
    _log_request("searchFlights", **arguments)
    result = search_flights(arguments)
    if isinstance(result, dict):
        _log_status(result["summary"])
    return _log_response("searchFlights", result)


def _open_support_ticket(arguments: dict[str, Any]) -> dict[str, Any]:
    _log_request("open_support_ticket", **arguments)
    ticket = {
        "ticket": "SUP-" + hashlib.sha1(json.dumps(arguments, sort_keys=True).encode()).hexdigest()[:8].upper(),
        "priority": arguments.get("priority") or "normal",
        "email": arguments.get("email"),
        "status": "open",
    }
    return _log_response("open_support_ticket", ticket)


_HANDLERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "contact": _submit_contact,
    "flights": _search_flights,
    "support": _open_support_ticket,
}

_ANNOTATIONS: dict[str, dict[str, Any]] = {
    "flights": {"readOnlyHint": True, "idempotentHint": True},
    "support": {"destructiveHint": False},
}


# =============================================================================
# Server construction
# =============================================================================
def build_server(name: str = "toolform-demo") -> tuple[FastMCP, dict[str, FormTool]]:
    """Create the FastMCP server with every demo form registered as a tool.

    Returns:
        The server and the FormTools keyed by form id, so a host can
        re-render or close them later.
    """
    mcp = FastMCP(name)
    sink = FastMCPSink(mcp)
    tools: dict[str, FormTool] = {}

    for form_id in list_available_forms():
        form = get_form(form_id)
        tool = FormTool(
            sink,
            name=form.tool_name,
            description=form.description,
            execute=_HANDLERS[form_id],
            overrides=form.overrides,
            annotations=_ANNOTATIONS.get(form_id),
        )
        for field_def in form.declared:
            tool.collector.register_field(field_def)
        schema = tool.render(form.tree)
        _log_status(f"{form.tool_name}: {sorted(schema['properties'])}")
        tools[form_id] = tool

    return mcp, tools


if __name__ == "__main__":
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    server, _ = build_server()
    server.run()
