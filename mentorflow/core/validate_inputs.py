"""Input Validation — required-field checks shared by every manager entry point.

Invariants:
    - PURE: raises ValidationError, never touches IO
    - Field names are reported in their external (camelCase) spelling
    - None and empty / whitespace-only strings both count as missing
"""

from mentorflow.core.errors import ValidationError


def require_fields(**fields: object) -> None:
    """Raise ValidationError naming every missing field."""
    missing = [
        name for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}", fields=missing,
        )
