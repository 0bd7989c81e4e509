# =============================================================================
# agent/__init__.py
# =============================================================================
# Google ADK configuration for the demo form assistant.  The agent only
# orchestrates: it reads tool schemas compiled by core/ and calls the tools
# served by tools/mcp_server.py.
# =============================================================================
