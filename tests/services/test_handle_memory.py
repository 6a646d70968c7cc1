"""Memory handler tests — single-key reads and save_student_memory.

Tests cover:
    - get_student_memory with key returns {key, value}, None for an unset key
    - save overwrites by default and appends to a list with append=true
    - Missing key/value or unknown student → Failed, nothing written
"""

from uuid import uuid4

import pytest

from mentorflow.core.domain_types import Phase
from mentorflow.core.records import MemoryRecord
from mentorflow.core.tool_result import Succeeded, Failed
from mentorflow.services.handle_memory import MemoryHandlers
from mentorflow.services.tool_registry import ToolContext


def _context(student_id) -> ToolContext:
    return ToolContext(student_id=student_id, current_phase=Phase.PHASE1)


async def test_get_single_key(store):
    student = store.add_student()
    store.memory[student.id] = [MemoryRecord("profile.learning_style", "visual")]
    result = await MemoryHandlers(store).get_student_memory(
        {"key": "profile.learning_style"}, _context(student.id),
    )
    assert result == Succeeded({"key": "profile.learning_style", "value": "visual"})


async def test_get_unset_key_is_none(store):
    student = store.add_student()
    result = await MemoryHandlers(store).get_student_memory(
        {"key": "profile.background"}, _context(student.id),
    )
    assert result == Succeeded({"key": "profile.background", "value": None})


async def test_save_overwrites(store):
    student = store.add_student()
    handlers = MemoryHandlers(store)
    await handlers.save_student_memory(
        {"key": "profile.learning_style", "value": "visual"}, _context(student.id),
    )
    result = await handlers.save_student_memory(
        {"key": "profile.learning_style", "value": "hands-on"}, _context(student.id),
    )
    assert isinstance(result, Succeeded)
    assert result.data["message"] == "Memory saved for key: profile.learning_style"
    assert [(e.key, e.value) for e in store.memory[student.id]] == [
        ("profile.learning_style", "hands-on"),
    ]


async def test_save_append_builds_list(store):
    student = store.add_student()
    store.memory[student.id] = [MemoryRecord("profile.interests", ["rag"])]
    result = await MemoryHandlers(store).save_student_memory(
        {"key": "profile.interests", "value": "agents", "append": True},
        _context(student.id),
    )
    assert result.data["value"] == ["rag", "agents"]
    assert result.data["message"] == "Memory appended to key: profile.interests"


async def test_append_replaces_non_list_value(store):
    student = store.add_student()
    store.memory[student.id] = [MemoryRecord("profile.interests", "rag")]
    result = await MemoryHandlers(store).save_student_memory(
        {"key": "profile.interests", "value": "agents", "append": True},
        _context(student.id),
    )
    assert result.data["value"] == ["agents"]


@pytest.mark.parametrize("input_data,error", [
    ({"value": "visual"}, "Missing required parameter: key"),
    ({"key": "  ", "value": "visual"}, "Missing required parameter: key"),
    ({"key": "profile.learning_style"}, "Missing required parameter: value"),
])
async def test_save_missing_input_fails(store, input_data, error):
    student = store.add_student()
    result = await MemoryHandlers(store).save_student_memory(
        input_data, _context(student.id),
    )
    assert result == Failed(error)
    assert store.memory == {}


async def test_save_unknown_student_fails(store):
    result = await MemoryHandlers(store).save_student_memory(
        {"key": "profile.learning_style", "value": "visual"}, _context(uuid4()),
    )
    assert isinstance(result, Failed)
    assert "not found" in result.error
    assert store.memory == {}
