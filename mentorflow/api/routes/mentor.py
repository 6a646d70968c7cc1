"""Mentor — direct messages and on-demand notebook artifacts.

Invariants:
    - send-message bypasses draft review (stored as approved)
    - generate-colab resolves the tool result exhaustively; tool failure → 500
"""

from fastapi import APIRouter, Depends

from mentorflow.api.dependencies import get_message_lifecycle, get_tool_registry
from mentorflow.api.envelope import ok
from mentorflow.schemas.requests import GenerateArtifactRequest, SendMessageRequest
from mentorflow.services.artifact import generate_artifact
from mentorflow.services.message_lifecycle import MessageLifecycleManager
from mentorflow.services.tool_registry import ToolRegistry

router = APIRouter(prefix="/api/mentor", tags=["mentor"])


@router.post("/send-message")
async def send_direct_message(
    body: SendMessageRequest,
    lifecycle: MessageLifecycleManager = Depends(get_message_lifecycle),
):
    message_id = await lifecycle.send_direct_message(body.student_id, body.content)
    return ok({"messageId": str(message_id)})


@router.post("/generate-colab")
async def generate_colab(
    body: GenerateArtifactRequest,
    registry: ToolRegistry = Depends(get_tool_registry),
):
    artifact = await generate_artifact(
        registry, body.student_id, body.student_name, body.question,
    )
    return ok(artifact)
