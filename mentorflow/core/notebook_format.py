"""Notebook Format — pure builders for Colab-ready .ipynb documents.

Invariants:
    - PURE: no IO, no clock (callers pass timestamps in)
    - Output is nbformat 4 with a Python 3 kernelspec and Colab metadata
    - Every source line except the last ends with "\\n" (Jupyter line convention)
    - Unknown cell types are written as code cells

Design Decisions:
    - parse_cells falls back to regex extraction: models wrap JSON in ```json
      blocks often enough that rejecting it would waste a call
"""

import json
import re
from typing import Any

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_UNSAFE_TITLE_RE = re.compile(r"[^a-zA-Z0-9 ]")
_UNSAFE_TOPIC_RE = re.compile(r"[^a-zA-Z0-9]")


def split_source(raw: str | list[str] | None) -> list[str]:
    """Normalize a cell source into Jupyter's list-of-lines form."""
    if isinstance(raw, list):
        lines = [str(line) for line in raw]
        return [
            line if i == len(lines) - 1 or line.endswith("\n") else line + "\n"
            for i, line in enumerate(lines)
        ]
    parts = str(raw or "").split("\n")
    return [
        part if i == len(parts) - 1 else part + "\n"
        for i, part in enumerate(parts)
    ]


def build_cell(cell: dict[str, Any]) -> dict[str, Any]:
    source = split_source(cell.get("source"))
    if cell.get("cell_type") == "markdown":
        return {"cell_type": "markdown", "metadata": {}, "source": source}
    return {
        "cell_type": "code",
        "execution_count": None,
        "metadata": {},
        "outputs": [],
        "source": source,
    }


def build_notebook(
    title: str, cells: list[dict[str, Any]], student_name: str | None = None,
) -> dict[str, Any]:
    """Assemble the full notebook document."""
    safe_title = _UNSAFE_TITLE_RE.sub("", title)[:50]
    return {
        "nbformat": 4,
        "nbformat_minor": 0,
        "metadata": {
            "colab": {
                "name": f"{safe_title}_{student_name or 'Student'}.ipynb",
                "provenance": [],
                "toc_visible": True,
            },
            "kernelspec": {
                "display_name": "Python 3",
                "language": "python",
                "name": "python3",
            },
            "language_info": {"name": "python", "version": "3.9"},
        },
        "cells": [build_cell(c) for c in cells],
    }


def notebook_filename(topic: str, timestamp_ms: int) -> str:
    safe_topic = _UNSAFE_TOPIC_RE.sub("_", topic)[:30]
    return f"{safe_topic}_{timestamp_ms}.ipynb"


def parse_cells(text: str) -> list[dict[str, Any]]:
    """Parse a model response into a list of {cell_type, source} dicts.

    Fallback levels:
    1. Direct json.loads (array, or object with a "cells" key)
    2. Regex: extract the outermost [...] block (handles ```json wrapping)

    Raises ValueError when neither level yields a list of objects.
    """
    text = text.strip()
    payload: Any = None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        match = _ARRAY_RE.search(text)
        if match:
            try:
                payload = json.loads(match.group())
            except json.JSONDecodeError:
                payload = None
    if isinstance(payload, dict):
        payload = payload.get("cells")
    if not isinstance(payload, list) or not payload or not all(
        isinstance(c, dict) for c in payload
    ):
        raise ValueError("Notebook cells must be a non-empty JSON array of objects")
    return payload


def extract_title(cells: list[dict[str, Any]], fallback: str) -> str:
    """First markdown heading in the notebook, else fallback."""
    for cell in cells:
        if cell.get("cell_type") != "markdown":
            continue
        for line in split_source(cell.get("source")):
            stripped = line.strip()
            if stripped.startswith("#"):
                heading = stripped.lstrip("#").strip()
                if heading:
                    return heading
    return fallback
