# =============================================================================
# tools/__init__.py
# =============================================================================
# The registration side: takes compiled schemas from core/ and exposes them
# as agent-callable tools.
#
#   registration → ToolDefinition, ToolSink, FastMCPSink, ToolBinding
#   events       → toolactivated / toolcancel forwarding
#   form_tool    → FormTool: one UI form kept registered as one tool
#   mcp_server   → the FastMCP demo server built from core/forms.py
#
# Business logic stays in core/; this package only adapts it.
# =============================================================================
