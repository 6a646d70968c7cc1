"""Memory Handlers — get_student_memory, save_student_memory.

Invariants:
    - Student is always the acting student from ToolContext
    - Unknown student returns Failed, never raises
    - get_student_memory with key returns {key, value}; value is None for an unset key
    - save_student_memory needs key and value; append adds value to the stored list
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from mentorflow.core.errors import NotFoundError
from mentorflow.core.repository_protocols import StudentStore
from mentorflow.core.tool_result import ToolResult, Succeeded, Failed
from mentorflow.services.student_memory import get_student_memory, utcnow
from mentorflow.services.tool_registry import ToolContext


class MemoryHandlers:
    """Student memory tool handlers."""

    def __init__(
        self, store: StudentStore, clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock

    async def get_student_memory(
        self, input_data: dict[str, Any], context: ToolContext,
    ) -> ToolResult:
        key = input_data.get("key")
        if key:
            entry = await self.store.get_memory(context.student_id, key)
            return Succeeded({"key": key, "value": entry.value if entry else None})

        try:
            profile = await get_student_memory(
                self.store, context.student_id, self.clock(),
            )
        except NotFoundError as e:
            return Failed(e.message)
        return Succeeded({"profile": profile})

    async def save_student_memory(
        self, input_data: dict[str, Any], context: ToolContext,
    ) -> ToolResult:
        key = input_data.get("key")
        value = input_data.get("value")
        append = bool(input_data.get("append"))
        if not isinstance(key, str) or not key.strip():
            return Failed("Missing required parameter: key")
        if value is None:
            return Failed("Missing required parameter: value")

        if await self.store.get_student(context.student_id) is None:
            return Failed(f"Student {context.student_id} not found")

        entry = await self.store.upsert_memory(
            context.student_id, key, value, append=append,
        )
        verb = "appended to" if append else "saved for"
        return Succeeded({
            "message": f"Memory {verb} key: {key}",
            "key": key,
            "value": entry.value,
        })
