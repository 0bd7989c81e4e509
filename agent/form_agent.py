# =============================================================================
# agent/form_agent.py  —  Google ADK agent that fills forms through tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds an ADK agent whose only tools are the demo forms served by
#   tools/mcp_server.py.  The agent never sees a hand-written schema: every
#   parameter, enum and constraint it is shown was compiled by core/ from a
#   UI tree.
#
#   ┌──────────────────────────┐  stdio  ┌──────────────────────────────┐
#   │ ADK Agent                │────────▶│ FastMCP (tools/mcp_server)   │
#   │  LiteLlm via OpenRouter  │         │  submit_contact              │
#   │  FORM_ASSISTANT_PROMPT   │         │  searchFlights               │
#   └──────────────────────────┘         │  open_support_ticket         │
#                                        └──────────────┬───────────────┘
#                                                       ▼
#                                        core/ (tree → merge → schema)
#
# MODEL:
#   "openrouter/openai/gpt-4o" through LiteLlm; LiteLlm reads
#   OPENROUTER_API_KEY from the environment (main.py loads .env first).
#   Set TOOLFORM_AGENT_MODEL to use another model string.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import FORM_ASSISTANT_PROMPT

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent() -> Agent:
    """Create the form assistant agent, wired to the demo tool server.

    The server runs as `uv run python -m tools.mcp_server` from the project
    root, so the subprocess uses the project's virtual environment and can
    import core/ and tools/.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "--directory", project_root, "python", "-m", "tools.mcp_server"],
        ),
    )

    return Agent(
        name="form_assistant",
        model=LiteLlm(model=os.environ.get("TOOLFORM_AGENT_MODEL", DEFAULT_MODEL)),
        instruction=FORM_ASSISTANT_PROMPT,
        tools=[mcp_tools],
    )
