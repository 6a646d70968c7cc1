"""Memory Tool Schemas — Anthropic Tool Use format for reading and writing student memory.

Invariants:
    - The acting student comes from ToolContext, never from model input
    - get_student_memory without key returns the full profile
"""

GET_STUDENT_MEMORY = "get_student_memory"
SAVE_STUDENT_MEMORY = "save_student_memory"

TOOLS_MEMORY = [
    {
        "name": GET_STUDENT_MEMORY,
        "description": (
            "Returns what is known about the current student: phase, days in "
            "phase, progress, research topic, learning style, interests, "
            "strengths, challenges and recent topics. Call before "
            "personalizing an explanation. Pass key to read a single entry."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "key": {
                    "type": "string",
                    "description": (
                        "Memory key, e.g. 'profile.interests' or "
                        "'profile.learning_style'. Omit for the full profile."
                    ),
                },
            },
            "required": [],
        },
    },
    {
        "name": SAVE_STUDENT_MEMORY,
        "description": (
            "Saves something worth remembering about the current student to "
            "long-term memory. Use append for list entries such as interests "
            "or topics discussed."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "key": {
                    "type": "string",
                    "description": "Memory key, e.g. 'profile.challenges'.",
                },
                "value": {
                    "type": "string",
                    "description": "Value to store.",
                },
                "append": {
                    "type": "boolean",
                    "description": "Append value to the list stored under key.",
                },
            },
            "required": ["key", "value"],
        },
    },
]
