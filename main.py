# =============================================================================
# main.py  —  Entry point for the form assistant demo
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py              # talk to the agent
#   uv run python main.py --schemas    # print the compiled tool schemas and exit
#
# WHAT HAPPENS:
#   1. .env is loaded (OPENROUTER_API_KEY, TOOLFORM_* settings)
#   2. The ADK agent starts tools/mcp_server.py as a subprocess
#   3. Your message goes to the agent, which fills forms via tool calls
#   4. Tool calls and the final answer are printed as they stream in
# =============================================================================

import asyncio
import sys

from dotenv import load_dotenv

# Must run before the agent is created: LiteLlm reads OPENROUTER_API_KEY
# from the environment when it initializes.
load_dotenv()

from google.adk.runners import Runner
from google.adk.sessions import InMemorySessionService
from google.genai import types

from agent.form_agent import create_agent
from core.compiler import dumps_schema

APP_NAME = "form_assistant"
USER_ID = "demo_user"


def print_schemas() -> None:
    """Print every demo tool's compiled input schema, one JSON line each."""
    from tools.mcp_server import build_server

    _, tools = build_server()
    for tool in tools.values():
        print(f"{tool.name}: {dumps_schema(tool.schema)}")


async def run_agent() -> None:
    """Run the form assistant interactively until the user quits."""
    print("=" * 70)
    print("  FORM ASSISTANT")
    print("  Google ADK + LiteLlm + FastMCP, schemas compiled from UI trees")
    print("=" * 70)
    agent = create_agent()

    session_service = InMemorySessionService()
    runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("Agent ready. Type 'quit' to exit.\n")

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\nGoodbye!")
            break
        if not user_input:
            continue

        user_message = types.Content(role="user", parts=[types.Part(text=user_input)])
        final_response = ""

        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=user_message,
        ):
            if event.content and event.content.parts:
                for part in event.content.parts:
                    if getattr(part, "text", None):
                        final_response = part.text
                    if getattr(part, "function_call", None):
                        print(f"  -> calling tool: {part.function_call.name}")

        print("-" * 70)
        if final_response:
            print(f"\nAgent:\n\n{final_response}")
        else:
            print("\nNo response generated. The agent may have encountered an error.")


if __name__ == "__main__":
    if "--schemas" in sys.argv[1:]:
        print_schemas()
    else:
        asyncio.run(run_agent())
