"""Artifact Generation — mentor-triggered notebook for a student's question.

Invariants:
    - Topic comes from core/classify_topic.py, never from the caller
    - Tool is invoked with context phase1 (artifacts target Phase I learners)
    - Every ToolResult shape is resolved explicitly; Failed raises ToolExecutionError
    - Succeeded must carry message, downloadLink and downloadUrl; a missing key is a bug
"""

import logging

from mentorflow.core.classify_topic import classify_topic
from mentorflow.core.domain_types import StudentId, Phase
from mentorflow.core.errors import ToolExecutionError, ErrorContext
from mentorflow.core.tool_result import Succeeded, SucceededEmpty, Failed
from mentorflow.core.validate_inputs import require_fields
from mentorflow.services.define_notebook_tools import CREATE_COLAB_NOTEBOOK
from mentorflow.services.tool_registry import ToolRegistry, ToolContext

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_MESSAGE = "I've created a practical Colab notebook for you!"


async def generate_artifact(
    registry: ToolRegistry,
    student_id: StudentId | None,
    student_name: str | None,
    question: str | None,
) -> dict[str, str]:
    """Classify, generate, and return {message, downloadLink, downloadUrl}."""
    require_fields(studentId=student_id, question=question)
    topic = classify_topic(question)
    logger.info(
        f"Generating artifact on topic '{topic.value}'",
        extra={"student_id": student_id, "tool_name": CREATE_COLAB_NOTEBOOK},
    )

    result = await registry.invoke(
        CREATE_COLAB_NOTEBOOK,
        {"topic": topic.value, "question": question, "studentName": student_name},
        ToolContext(student_id=student_id, current_phase=Phase.PHASE1),
    )

    match result:
        case Succeeded(data=data):
            return {
                "message": data["message"],
                "downloadLink": data["downloadLink"],
                "downloadUrl": data["downloadUrl"],
            }
        case SucceededEmpty():
            return {
                "message": DEFAULT_ARTIFACT_MESSAGE,
                "downloadLink": "",
                "downloadUrl": "",
            }
        case Failed(error=error):
            raise ToolExecutionError(
                CREATE_COLAB_NOTEBOOK,
                error or "Failed to generate notebook",
                ErrorContext(student_id=str(student_id)),
            )
