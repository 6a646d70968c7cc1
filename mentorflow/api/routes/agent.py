"""Agent — tool introspection and student memory for the mentoring agent.

Invariants:
    - GET /tools reflects exactly the registered set, in registration order
    - GET /memory 404s for an unknown student
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from mentorflow.api.dependencies import get_store, get_tool_registry
from mentorflow.api.envelope import ok
from mentorflow.infrastructure.sql_store import SqlStore
from mentorflow.services.student_memory import get_student_memory
from mentorflow.services.tool_registry import ToolRegistry

router = APIRouter(prefix="/api/agent", tags=["agent"])


@router.get("/tools")
async def list_tools(registry: ToolRegistry = Depends(get_tool_registry)):
    tools = registry.list_tools()
    return ok({"count": len(tools), "tools": tools})


@router.get("/memory")
async def read_student_memory(
    student_id: UUID | None = Query(None, alias="studentId"),
    store: SqlStore = Depends(get_store),
):
    profile = await get_student_memory(store, student_id)
    return ok({"profile": profile})
