"""Notebook Tool Schemas — Anthropic Tool Use format for artifact generation.

Invariants:
    - topic and question are required; studentName only personalizes the file name
    - Handler lives in handle_notebook.py
"""

CREATE_COLAB_NOTEBOOK = "create_colab_notebook"

TOOLS_NOTEBOOK = [
    {
        "name": CREATE_COLAB_NOTEBOOK,
        "description": (
            "Creates a detailed educational Google Colab notebook. "
            "Use when the student asks for hands-on practice or a worked, "
            "runnable example. Takes 1-2 minutes. "
            "RETURNS a download link to share with the student."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "topic": {
                    "type": "string",
                    "description": "The technical topic to create a notebook for",
                },
                "question": {
                    "type": "string",
                    "description": "The specific question the student asked",
                },
                "studentName": {
                    "type": "string",
                    "description": "Name of the student (for personalization)",
                },
            },
            "required": ["topic", "question"],
        },
    },
]
