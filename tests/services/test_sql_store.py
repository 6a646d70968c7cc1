"""SqlStore tests — the StoreAdapter contract against real SQL (SQLite).

Tests cover:
    - insert_conversation_if_absent converges on one row per student
    - list_messages filters by status in SQL and orders by created_at desc
    - compare_and_set_phase / update_message / delete_message only act on the
      expected old value
    - upsert_memory overwrites or appends under the (student_id, key) constraint
    - list_all_drafts keeps only agent drafts, newest first, with the owning student
    - SQLAlchemy failures surface as PersistenceError
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from mentorflow.core.domain_types import Phase, MessageRole, MessageStatus
from mentorflow.core.errors import PersistenceError
from mentorflow.infrastructure.sql_store import SqlStore
from mentorflow.models.memory_entry import MemoryEntry
from mentorflow.models.message import Message
from mentorflow.models.student import Student

T0 = datetime(2025, 2, 1, tzinfo=timezone.utc)


async def test_get_student_maps_row(sql_store, seed_student):
    record = await sql_store.get_student(seed_student.id)
    assert record.id == seed_student.id
    assert record.current_phase == Phase.PHASE1
    assert await sql_store.get_student(uuid.uuid4()) is None


async def test_conversation_insert_is_idempotent(sql_store, seed_student, test_session_factory):
    first = await sql_store.insert_conversation_if_absent(seed_student.id)
    async with test_session_factory() as other_session:
        second = await SqlStore(other_session).insert_conversation_if_absent(
            seed_student.id,
        )
    assert first.id == second.id
    assert (await sql_store.find_conversation(seed_student.id)).id == first.id


async def test_list_messages_filters_and_orders(sql_store, seed_student, test_db):
    conversation = await sql_store.insert_conversation_if_absent(seed_student.id)
    rows = [
        ("oldest", "sent", T0),
        ("draft", "draft", T0 + timedelta(minutes=1)),
        ("newest", "approved", T0 + timedelta(minutes=2)),
    ]
    for content, status, created_at in rows:
        test_db.add(Message(
            conversation_id=conversation.id, role="agent",
            content=content, status=status, created_at=created_at,
        ))
    await test_db.commit()

    visible = await sql_store.list_messages(
        conversation.id, (MessageStatus.APPROVED, MessageStatus.SENT),
    )
    assert [m.content for m in visible] == ["newest", "oldest"]

    drafts = await sql_store.list_messages(conversation.id, (MessageStatus.DRAFT,))
    assert [m.content for m in drafts] == ["draft"]


async def test_compare_and_set_phase_only_from_expected(sql_store, seed_student):
    moved = await sql_store.compare_and_set_phase(
        seed_student.id, Phase.PHASE1, Phase.PHASE2, T0,
    )
    assert moved
    again = await sql_store.compare_and_set_phase(
        seed_student.id, Phase.PHASE1, Phase.PHASE2, T0 + timedelta(days=1),
    )
    assert not again

    record = await sql_store.get_student(seed_student.id)
    assert record.current_phase == Phase.PHASE2
    assert record.phase2_start.replace(tzinfo=timezone.utc) == T0


async def test_update_and_delete_message_compare_and_set(sql_store, seed_student):
    conversation = await sql_store.insert_conversation_if_absent(seed_student.id)
    draft = await sql_store.insert_message(
        conversation.id, MessageRole.AGENT, "hello", MessageStatus.DRAFT,
        tool_calls=[{"name": "create_colab_notebook"}],
    )
    assert draft.tool_calls == [{"name": "create_colab_notebook"}]

    # Wrong expected status: no-op
    assert await sql_store.update_message(
        draft.id, MessageStatus.APPROVED, MessageStatus.SENT,
    ) is None
    assert not await sql_store.delete_message(draft.id, MessageStatus.APPROVED)

    approved = await sql_store.update_message(
        draft.id, MessageStatus.DRAFT, MessageStatus.APPROVED, "edited",
    )
    assert approved.status == MessageStatus.APPROVED
    assert approved.content == "edited"

    other = await sql_store.insert_message(
        conversation.id, MessageRole.AGENT, "bye", MessageStatus.DRAFT,
    )
    assert await sql_store.delete_message(other.id, MessageStatus.DRAFT)
    assert await sql_store.get_message(other.id) is None


async def test_list_memory_sorted_by_key(sql_store, seed_student, test_db):
    test_db.add_all([
        MemoryEntry(student_id=seed_student.id, key="profile.interests", value=["rag"]),
        MemoryEntry(student_id=seed_student.id, key="history.questions_asked", value=3),
    ])
    await test_db.commit()
    entries = await sql_store.list_memory(seed_student.id)
    assert [e.key for e in entries] == ["history.questions_asked", "profile.interests"]
    assert entries[1].value == ["rag"]


async def test_upsert_memory_overwrites_and_appends(sql_store, seed_student):
    await sql_store.upsert_memory(seed_student.id, "profile.learning_style", "visual")
    await sql_store.upsert_memory(seed_student.id, "profile.learning_style", "hands-on")
    entry = await sql_store.get_memory(seed_student.id, "profile.learning_style")
    assert entry.value == "hands-on"

    first = await sql_store.upsert_memory(
        seed_student.id, "profile.interests", "rag", append=True,
    )
    assert first.value == ["rag"]
    second = await sql_store.upsert_memory(
        seed_student.id, "profile.interests", "agents", append=True,
    )
    assert second.value == ["rag", "agents"]

    entries = await sql_store.list_memory(seed_student.id)
    assert [(e.key, e.value) for e in entries] == [
        ("profile.interests", ["rag", "agents"]),
        ("profile.learning_style", "hands-on"),
    ]
    assert await sql_store.get_memory(seed_student.id, "profile.background") is None


async def test_list_all_drafts_joins_owner(sql_store, seed_student, test_db):
    other = Student(name="Grace", email="grace@example.com")
    test_db.add(other)
    await test_db.commit()
    ada = await sql_store.insert_conversation_if_absent(seed_student.id)
    grace = await sql_store.insert_conversation_if_absent(other.id)
    rows = [
        (ada.id, "agent", "ada old draft", "draft", T0),
        (grace.id, "agent", "grace draft", "draft", T0 + timedelta(minutes=1)),
        (ada.id, "agent", "approved", "approved", T0 + timedelta(minutes=2)),
        (grace.id, "agent", "sent", "sent", T0 + timedelta(minutes=3)),
        (ada.id, "student", "student draft", "draft", T0 + timedelta(minutes=4)),
    ]
    for conversation_id, role, content, status, created_at in rows:
        test_db.add(Message(
            conversation_id=conversation_id, role=role,
            content=content, status=status, created_at=created_at,
        ))
    await test_db.commit()

    drafts = await sql_store.list_all_drafts()
    assert [d.message.content for d in drafts] == ["grace draft", "ada old draft"]
    assert [d.student_name for d in drafts] == ["Grace", "Ada"]
    assert drafts[0].student_id == other.id
    assert drafts[1].student_id == seed_student.id


async def test_driver_failure_becomes_persistence_error(sql_store, test_engine, seed_student):
    async with test_engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE memory")
    with pytest.raises(PersistenceError) as exc:
        await sql_store.list_memory(seed_student.id)
    assert exc.value.operation == "list_memory"
