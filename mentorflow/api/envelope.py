"""Response Envelope — the success half of {success, data | error}.

Failure envelopes come from MentorflowError.to_response() via the global
error handlers, so routes only ever build the success shape.
"""

from typing import Any


def ok(data: Any = None) -> dict[str, Any]:
    if data is None:
        return {"success": True}
    return {"success": True, "data": data}
