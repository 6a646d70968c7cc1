"""Notebook Handlers — create_colab_notebook.

Invariants:
    - Missing topic/question returns Failed before the author is called
    - Author failures (API or unparseable output) return Failed, never raise
    - Files land in output_dir as <safe_topic>_<epoch_ms>.ipynb and are served
      under {base_url}/notebooks/
    - Success payload always carries message, downloadLink and downloadUrl

Design Decisions:
    - Follows impureim sandwich: author call (IO) → pure notebook build → file write (IO)
    - File write runs in a worker thread so the event loop never blocks on disk
"""

import asyncio
import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mentorflow.core.errors import AnthropicAPIError
from mentorflow.core.notebook_format import build_notebook, notebook_filename
from mentorflow.core.tool_result import ToolResult, Succeeded, Failed
from mentorflow.services.notebook_author import NotebookAuthor
from mentorflow.services.tool_registry import ToolContext

logger = logging.getLogger(__name__)

COLAB_INSTRUCTIONS = (
    "To open in Google Colab:\n"
    "1. Download the notebook from the link above\n"
    "2. Go to colab.research.google.com\n"
    '3. Click "Upload" and select the downloaded file\n'
    "4. Run cells sequentially from top to bottom"
)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def _write_notebook(path: Path, notebook: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(notebook, indent=2, ensure_ascii=False), encoding="utf-8")


class NotebookHandlers:
    """Artifact generation handlers."""

    def __init__(
        self,
        author: NotebookAuthor,
        output_dir: str | Path,
        base_url: str,
        clock_ms: Callable[[], int] = _epoch_ms,
    ):
        self.author = author
        self.output_dir = Path(output_dir)
        self.base_url = base_url.rstrip("/")
        self.clock_ms = clock_ms

    async def create_colab_notebook(
        self, input_data: dict[str, Any], context: ToolContext,
    ) -> ToolResult:
        topic = str(input_data.get("topic") or "").strip()
        question = str(input_data.get("question") or "").strip()
        student_name = input_data.get("studentName") or None
        if not topic or not question:
            return Failed("Missing required input: topic, question")

        logger.info(
            f"Generating notebook on '{topic}'",
            extra={"student_id": context.student_id, "tool_name": "create_colab_notebook"},
        )
        try:
            draft = await self.author.write(topic, question, student_name)
        except (AnthropicAPIError, ValueError) as e:
            logger.error(f"Notebook authoring failed: {e}")
            return Failed(f"Failed to create notebook: {e}")

        notebook = build_notebook(draft.title, draft.cells, student_name)
        filename = notebook_filename(topic, self.clock_ms())
        await asyncio.to_thread(_write_notebook, self.output_dir / filename, notebook)

        url = f"{self.base_url}/notebooks/{filename}"
        cell_count = len(draft.cells)
        return Succeeded({
            "filename": filename,
            "title": draft.title,
            "downloadUrl": url,
            "downloadLink": f"[Download Colab Notebook: {draft.title}]({url})",
            "colabInstructions": COLAB_INSTRUCTIONS,
            "message": (
                f'I\'ve created a comprehensive Colab notebook on "{draft.title}" '
                f"with {cell_count} cells!"
            ),
            "cellCount": cell_count,
        })
