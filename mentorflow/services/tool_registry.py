"""Tool Registry — immutable set of named, schema-described tools with uniform dispatch.

Invariants:
    - Tools are fixed at construction; duplicate names raise ValueError
    - list_tools() preserves registration order
    - invoke() on an unknown name raises UnknownToolError before any handler runs
    - invoke() always returns a ToolResult: handler exceptions and legacy
      {success, data, error} dicts are normalized, never propagated raw
    - A handler exception is logged with its traceback; the Failed reason is a
      fixed "Tool <name> failed" so paths and driver text stay server-side
    - args are NOT validated against input_schema here (tools own that)

Design Decisions:
    - Explicit constructor list over a register() method: nothing can add tools
      after the registry is handed to request handlers
    - ToolContext carries ambient caller state (acting student, phase) separately
      from the model-facing args
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from mentorflow.core.domain_types import StudentId, ConversationId, Phase
from mentorflow.core.errors import UnknownToolError
from mentorflow.core.tool_result import ToolResult, Failed, from_envelope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolContext:
    """Ambient state of the caller invoking a tool."""
    student_id: StudentId
    current_phase: Phase
    conversation_id: ConversationId | None = None


ToolHandler = Callable[[dict[str, Any], ToolContext], Awaitable[ToolResult | dict]]


@dataclass(frozen=True)
class RegisteredTool:
    """Tool definition (Anthropic tool-use format) bound to its handler."""
    definition: dict[str, Any]
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.definition["name"]


class ToolRegistry:
    """Routes tool_name -> handler. Explicit registration, no auto-discovery."""

    def __init__(self, tools: Iterable[RegisteredTool]):
        self._tools: dict[str, RegisteredTool] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Tool {tool.name} already registered")
            self._tools[tool.name] = tool

    def __len__(self) -> int:
        return len(self._tools)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_tool(self, name: str) -> dict[str, Any] | None:
        tool = self._tools.get(name)
        return tool.definition if tool else None

    def tool_names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[dict[str, Any]]:
        """Raw definitions, e.g. for the `tools` argument of a model call."""
        return [t.definition for t in self._tools.values()]

    def list_tools(self) -> list[dict[str, Any]]:
        """Introspection view: name, description, parameters, required."""
        return [
            {
                "name": t.name,
                "description": t.definition.get("description", ""),
                "parameters": t.definition["input_schema"].get("properties", {}),
                "required": list(t.definition["input_schema"].get("required", [])),
            }
            for t in self._tools.values()
        ]

    async def invoke(
        self, tool_name: str, args: dict[str, Any], context: ToolContext,
    ) -> ToolResult:
        tool = self._tools.get(tool_name)
        if tool is None:
            logger.warning(
                f"Unknown tool '{tool_name}'",
                extra={"tool_name": tool_name, "error_code": "UNKNOWN_TOOL"},
            )
            raise UnknownToolError(tool_name)

        try:
            raw = await tool.handler(args, context)
        except Exception as e:
            logger.error(
                f"Tool '{tool_name}' raised: {e}",
                extra={"tool_name": tool_name, "student_id": context.student_id},
                exc_info=True,
            )
            return Failed(f"Tool {tool_name} failed")

        result = from_envelope(raw) if isinstance(raw, dict) else raw
        if isinstance(result, Failed):
            logger.warning(
                f"Tool '{tool_name}' failed: {result.error}",
                extra={"tool_name": tool_name, "student_id": context.student_id},
            )
        else:
            logger.info(
                f"Tool '{tool_name}' succeeded",
                extra={"tool_name": tool_name, "student_id": context.student_id},
            )
        return result
