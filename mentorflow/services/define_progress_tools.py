"""Progress Tool Schemas — Anthropic Tool Use format for phase and progress tools."""

GET_STUDENT_PROGRESS = "get_student_progress"
TRANSITION_TO_PHASE2 = "transition_to_phase2"

TOOLS_PROGRESS = [
    {
        "name": GET_STUDENT_PROGRESS,
        "description": (
            "Returns the current student's phase, topic index (Phase I), "
            "milestone (Phase II) and research topic."
        ),
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
    {
        "name": TRANSITION_TO_PHASE2,
        "description": (
            "Moves the current student from Phase I to Phase II. Use once the "
            "student has finished the video curriculum and picked a research "
            "topic. Fails if the student is already in Phase II."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "research_topic": {
                    "type": "string",
                    "description": "The research topic the student chose.",
                },
            },
            "required": ["research_topic"],
        },
    },
]
