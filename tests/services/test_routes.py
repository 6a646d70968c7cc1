"""HTTP route tests — envelope shapes and error → status mapping.

Tests cover:
    - Every route answers with {success, data} or {success: false, error, code}
    - Missing / malformed fields → 400
    - Domain errors map to their HTTP status (404, 400, 409, 500)
    - Drafts never appear in GET /api/messages
"""

import uuid

import pytest

from mentorflow.core.errors import AnthropicAPIError
from mentorflow.models.message import Message
from mentorflow.models.student import Student


# ─── Health ──────────────────────────────────────────────────────

async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_readiness(client):
    response = await client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"


# ─── Mentor direct messages & inbox ──────────────────────────────

async def test_send_message_then_visible(client, seed_student):
    sent = await client.post(
        "/api/mentor/send-message",
        json={"studentId": str(seed_student.id), "content": "Welcome!"},
    )
    assert sent.status_code == 200
    body = sent.json()
    assert body["success"] is True
    message_id = body["data"]["messageId"]

    inbox = await client.get(f"/api/messages?studentId={seed_student.id}")
    assert inbox.status_code == 200
    messages = inbox.json()["data"]["messages"]
    assert [m["id"] for m in messages] == [message_id]
    assert messages[0]["status"] == "approved"
    assert messages[0]["role"] == "agent"


@pytest.mark.parametrize("payload", [
    {"content": "hi"},
    {"studentId": str(uuid.uuid4())},
    {"studentId": str(uuid.uuid4()), "content": "   "},
    {"studentId": "not-a-uuid", "content": "hi"},
])
async def test_send_message_bad_input_is_400(client, payload):
    response = await client.post("/api/mentor/send-message", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert body["error"]


async def test_messages_without_student_id_is_400(client):
    response = await client.get("/api/messages")
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: studentId"


async def test_messages_empty_without_conversation(client, seed_student):
    response = await client.get(f"/api/messages?studentId={seed_student.id}")
    assert response.json() == {"success": True, "data": {"messages": []}}


async def _seed_conversation_with_draft(client, test_db, student_id) -> str:
    """Direct message (creates the conversation) plus one pending draft."""
    sent = await client.post(
        "/api/mentor/send-message",
        json={"studentId": str(student_id), "content": "visible"},
    )
    visible = await test_db.get(Message, uuid.UUID(sent.json()["data"]["messageId"]))
    draft = Message(
        conversation_id=visible.conversation_id, role="agent",
        content="Subject: Week 1\n\nDraft body", status="draft",
    )
    test_db.add(draft)
    await test_db.commit()
    return str(draft.id)


async def test_drafts_hidden_from_inbox(client, test_db, seed_student):
    draft_id = await _seed_conversation_with_draft(client, test_db, seed_student.id)
    inbox = await client.get(f"/api/messages?studentId={seed_student.id}")
    assert draft_id not in [m["id"] for m in inbox.json()["data"]["messages"]]

    drafts = await client.get(f"/api/drafts?studentId={seed_student.id}")
    data = drafts.json()["data"]
    assert data["count"] == 1
    assert data["drafts"][0]["id"] == draft_id


# ─── Draft review ────────────────────────────────────────────────

async def test_edit_draft_keeps_subject(client, test_db, seed_student):
    draft_id = await _seed_conversation_with_draft(client, test_db, seed_student.id)
    response = await client.post(
        "/api/drafts",
        json={"action": "edit", "draftId": draft_id, "content": "New body"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Draft edited and approved"

    inbox = await client.get(f"/api/messages?studentId={seed_student.id}")
    contents = [m["content"] for m in inbox.json()["data"]["messages"]]
    assert "Subject: Week 1\n\nNew body" in contents


async def test_approve_twice_is_409(client, test_db, seed_student):
    draft_id = await _seed_conversation_with_draft(client, test_db, seed_student.id)
    first = await client.post("/api/drafts", json={"action": "approve", "draftId": draft_id})
    assert first.status_code == 200
    second = await client.post("/api/drafts", json={"action": "approve", "draftId": draft_id})
    assert second.status_code == 409
    assert second.json()["code"] == "INVALID_STATE_TRANSITION"


async def test_reject_draft(client, test_db, seed_student):
    draft_id = await _seed_conversation_with_draft(client, test_db, seed_student.id)
    response = await client.post("/api/drafts", json={"action": "reject", "draftId": draft_id})
    assert response.json() == {"success": True, "data": {"message": "Draft rejected"}}
    drafts = await client.get(f"/api/drafts?studentId={seed_student.id}")
    assert drafts.json()["data"]["count"] == 0


async def test_all_drafts_spans_students(client, test_db, seed_student):
    other = Student(name="Grace", email="grace@example.com")
    test_db.add(other)
    await test_db.commit()

    ada_draft = await _seed_conversation_with_draft(client, test_db, seed_student.id)
    grace_draft = await _seed_conversation_with_draft(client, test_db, other.id)
    approved = await client.post(
        "/api/drafts", json={"action": "approve", "draftId": ada_draft},
    )
    await client.post(f"/api/messages/{approved.json()['data']['messageId']}/sent")

    response = await client.get("/api/drafts/all")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["count"] == 1
    draft = data["drafts"][0]
    assert draft["id"] == grace_draft
    assert draft["studentId"] == str(other.id)
    assert draft["studentName"] == "Grace"
    assert set(draft) == {
        "id", "content", "toolCalls", "createdAt", "studentId", "studentName",
    }


async def test_all_drafts_empty(client):
    response = await client.get("/api/drafts/all")
    assert response.json() == {"success": True, "data": {"count": 0, "drafts": []}}


async def test_unknown_action_is_400(client):
    response = await client.post(
        "/api/drafts", json={"action": "publish", "draftId": str(uuid.uuid4())},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


async def test_missing_draft_is_404(client):
    response = await client.post(
        "/api/drafts", json={"action": "approve", "draftId": str(uuid.uuid4())},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


async def test_mark_sent(client, seed_student):
    sent = await client.post(
        "/api/mentor/send-message",
        json={"studentId": str(seed_student.id), "content": "hello"},
    )
    message_id = sent.json()["data"]["messageId"]
    response = await client.post(f"/api/messages/{message_id}/sent")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "sent"


# ─── Students ────────────────────────────────────────────────────

async def test_transition_once_then_400(client, seed_student):
    payload = {"studentId": str(seed_student.id)}
    first = await client.post("/api/students/transition", json=payload)
    assert first.status_code == 200
    assert first.json()["data"]["message"] == "Successfully transitioned to Phase II"

    second = await client.post("/api/students/transition", json=payload)
    assert second.status_code == 400
    assert second.json() == {
        "success": False,
        "error": "Student is already in Phase II",
        "code": "ALREADY_IN_TARGET_PHASE",
    }


async def test_transition_unknown_student_404(client):
    response = await client.post(
        "/api/students/transition", json={"studentId": str(uuid.uuid4())},
    )
    assert response.status_code == 404


async def test_transition_missing_student_400(client):
    response = await client.post("/api/students/transition", json={})
    assert response.status_code == 400


# ─── Agent ───────────────────────────────────────────────────────

async def test_list_tools(client):
    response = await client.get("/api/agent/tools")
    data = response.json()["data"]
    assert data["count"] == 5
    assert [t["name"] for t in data["tools"]] == [
        "create_colab_notebook",
        "get_student_memory",
        "save_student_memory",
        "get_student_progress",
        "transition_to_phase2",
    ]
    notebook = data["tools"][0]
    assert notebook["required"] == ["topic", "question"]
    assert set(notebook["parameters"]) == {"topic", "question", "studentName"}


async def test_memory(client, seed_student):
    response = await client.get(f"/api/agent/memory?studentId={seed_student.id}")
    assert response.status_code == 200
    profile = response.json()["data"]["profile"]
    assert profile["studentId"] == str(seed_student.id)
    assert profile["currentPhase"] == "phase1"


async def test_memory_unknown_student_404(client):
    response = await client.get(f"/api/agent/memory?studentId={uuid.uuid4()}")
    assert response.status_code == 404


# ─── Artifacts ───────────────────────────────────────────────────

async def test_generate_colab(client, author, seed_student, tmp_path):
    response = await client.post(
        "/api/mentor/generate-colab",
        json={
            "studentId": str(seed_student.id),
            "studentName": "Ada",
            "question": "How do transformers use attention?",
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"message", "downloadLink", "downloadUrl"}
    assert data["downloadUrl"].startswith("http://test/notebooks/transformers_")
    assert author.calls[0]["topic"] == "transformers"
    assert len(list(tmp_path.glob("*.ipynb"))) == 1


async def test_generate_colab_missing_question_400(client, author):
    response = await client.post(
        "/api/mentor/generate-colab", json={"studentId": str(uuid.uuid4())},
    )
    assert response.status_code == 400
    assert author.calls == []


async def test_generate_colab_tool_failure_500(client, author, seed_student):
    author.error = AnthropicAPIError("overloaded", "connection_error")
    response = await client.post(
        "/api/mentor/generate-colab",
        json={"studentId": str(seed_student.id), "question": "What is RAG?"},
    )
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "TOOL_EXECUTION_ERROR"
