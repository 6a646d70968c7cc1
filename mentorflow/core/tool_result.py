"""Tool Result — explicit outcome of a tool invocation.

Invariants:
    - Exactly three shapes: Succeeded (with payload), SucceededEmpty, Failed (with reason)
    - to_envelope() always yields {success: bool, data?: ..., error?: str}
    - from_envelope() accepts the loose dict shape tools historically returned

Design Decisions:
    - Separate frozen dataclasses + Union over one class with optional fields:
      call sites resolve outcomes with isinstance/match exhaustively instead of
      probing result["data"] with defaults
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Succeeded:
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return True

    def to_envelope(self) -> dict:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class SucceededEmpty:
    @property
    def success(self) -> bool:
        return True

    def to_envelope(self) -> dict:
        return {"success": True}


@dataclass(frozen=True)
class Failed:
    error: str

    @property
    def success(self) -> bool:
        return False

    def to_envelope(self) -> dict:
        return {"success": False, "error": self.error}


ToolResult = Union[Succeeded, SucceededEmpty, Failed]


def from_envelope(envelope: dict) -> ToolResult:
    """Normalize a {success, data?, error?} dict into a ToolResult."""
    if not envelope.get("success"):
        return Failed(envelope.get("error") or "Tool reported failure")
    data = envelope.get("data")
    if data is None:
        return SucceededEmpty()
    return Succeeded(data)
