# =============================================================================
# tools/events.py  —  Tool activation / cancellation signals
# =============================================================================
#
# Agents (or the browser-side runtime hosting them) announce that a tool was
# picked up or abandoned with a named event carrying the tool's name.  This
# bus just forwards those to whoever subscribed for that exact tool.
# =============================================================================

import logging
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)

TOOL_ACTIVATED = "toolactivated"
TOOL_CANCEL = "toolcancel"

ToolEventCallback = Callable[[str], None]


class ToolEventBus:
    """Routes `(event, tool_name)` signals to per-tool callbacks."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[str, ToolEventCallback]]] = defaultdict(list)

    def subscribe(self, event: str, tool_name: str, callback: ToolEventCallback) -> Callable[[], None]:
        """Call `callback(tool_name)` whenever `event` fires for `tool_name`.

        Returns:
            A function that removes the subscription (safe to call twice).
        """
        entry = (tool_name, callback)
        self._listeners[event].append(entry)

        def unsubscribe() -> None:
            listeners = self._listeners.get(event, [])
            if entry in listeners:
                listeners.remove(entry)

        return unsubscribe

    def dispatch(self, event: str, tool_name: str) -> int:
        """Fire `event` for `tool_name`; returns how many callbacks ran."""
        matched = [cb for name, cb in list(self._listeners.get(event, [])) if name == tool_name]
        logger.debug("%s for %r → %d listener(s)", event, tool_name, len(matched))
        for callback in matched:
            callback(tool_name)
        return len(matched)
