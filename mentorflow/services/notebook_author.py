"""Notebook Author — asks Claude for the cells of an educational notebook.

Invariants:
    - One model call per notebook; retries live in ResilientAnthropicClient
    - Output is a NotebookDraft (title + raw cells); building the .ipynb is pure
      (core/notebook_format.py) and happens in the tool handler
    - Unparseable model output raises ValueError; API failures raise AnthropicAPIError

Design Decisions:
    - NotebookAuthor is a Protocol: the handler depends on "something that writes
      cells", tests pass a canned author, production passes AnthropicNotebookAuthor
    - System prompt static per purpose, user message carries topic/question
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from mentorflow.core.errors import ErrorContext
from mentorflow.core.notebook_format import parse_cells, extract_title
from mentorflow.infrastructure.anthropic_client import ResilientAnthropicClient
from mentorflow.services.define_notebook_tools import CREATE_COLAB_NOTEBOOK

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotebookDraft:
    title: str
    cells: list[dict[str, Any]]


class NotebookAuthor(Protocol):
    async def write(
        self, topic: str, question: str, student_name: str | None,
    ) -> NotebookDraft: ...


SYSTEM_PROMPT = (
    "You are an expert research engineer and educator who creates runnable, "
    "educational Python notebooks. You use real ML components (PyTorch, "
    "numpy, matplotlib) at a reduced scale that runs on CPU in under five "
    "minutes. Every idea is explained in plain English before the code that "
    "demonstrates it, and every code cell prints or plots something worth "
    "interpreting."
)

_NOTEBOOK_SECTIONS = (
    "1. Title & overview (markdown): '# <title>' heading, summary, prerequisites, "
    "3-5 learning objectives\n"
    "2. Imports & setup (code): imports, fixed random seeds, printed versions\n"
    "3. Concept introduction (markdown): why this matters, analogies\n"
    "4. First-principles build-up: 3-6 rounds of markdown explanation, a "
    "5-20 line runnable code cell, markdown interpreting the output\n"
    "5. Putting it all together (code + markdown)\n"
    "6. Visualizations: 2-3 labelled matplotlib plots\n"
    "7. Exercises (markdown) with hints\n"
    "8. Summary & next steps (markdown)"
)


def build_user_prompt(topic: str, question: str, student_name: str | None) -> str:
    parts = [
        f"Topic: {topic}",
        f"Student question: {question}",
    ]
    if student_name:
        parts.append(f"Student name (address them once in the overview): {student_name}")
    parts.append(f"\nRequired sections, in order:\n{_NOTEBOOK_SECTIONS}")
    parts.append(
        "\nReturn ONLY a JSON array of cells, no markdown fencing. Each cell is "
        '{"cell_type": "markdown" | "code", "source": "<cell content>"}.'
    )
    return "\n".join(parts)


class AnthropicNotebookAuthor:
    """NotebookAuthor backed by the Anthropic Messages API."""

    def __init__(
        self, client: ResilientAnthropicClient, model: str, max_tokens: int,
    ):
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    async def write(
        self, topic: str, question: str, student_name: str | None,
    ) -> NotebookDraft:
        response = await self._client.create_message(
            model=self._model,
            max_tokens=self._max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{
                "role": "user",
                "content": build_user_prompt(topic, question, student_name),
            }],
            context=ErrorContext(tool_name=CREATE_COLAB_NOTEBOOK),
        )
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        cells = parse_cells(text)
        title = extract_title(cells, fallback=topic.replace("_", " ").title())
        logger.info(
            f"Notebook drafted: {title} ({len(cells)} cells)",
            extra={"tool_name": CREATE_COLAB_NOTEBOOK},
        )
        return NotebookDraft(title=title, cells=cells)
