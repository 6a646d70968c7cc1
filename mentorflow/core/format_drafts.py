"""Draft Formatting — pure helpers for mentor edits of agent drafts.

Invariants:
    - PURE: no IO
    - An edited draft keeps the original "Subject:" line unless the edit supplies its own
"""

SUBJECT_PREFIX = "Subject:"


def merge_edited_content(original: str | None, edited: str) -> str:
    """Prepend the original subject line to an edit that dropped it."""
    if not original or not original.startswith(SUBJECT_PREFIX):
        return edited
    if edited.startswith(SUBJECT_PREFIX):
        return edited
    subject = original.split("\n", 1)[0]
    return f"{subject}\n\n{edited}"
