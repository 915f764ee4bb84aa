from typing import Any, Optional

from pydantic import BaseModel, Field


class ResponseEnvelope(BaseModel):
    """Uniform result of every mutating operation: status code, message and optional payload."""

    code: int = Field(..., description="Numeric status code")
    message: Optional[str] = Field(None, description="Text description of the outcome")
    data: Optional[Any] = Field(None, description="Encapsulated payload")

    def is_success_status_code(self, *codes: int) -> bool:
        """True for 2xx, or for any extra code the caller chooses to accept (e.g. 304)."""
        return 200 <= self.code < 300 or self.code in codes

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


def ok(message: str, data: Any = None) -> ResponseEnvelope:
    return ResponseEnvelope(code=200, message=message, data=data)


def not_modified(message: str, data: Any = None) -> ResponseEnvelope:
    return ResponseEnvelope(code=304, message=message, data=data)


def bad_request(message: str, data: Any = None) -> ResponseEnvelope:
    return ResponseEnvelope(code=400, message=message, data=data)


def not_found(message: str, data: Any = None) -> ResponseEnvelope:
    return ResponseEnvelope(code=404, message=message, data=data)


def orphaned(message: str, data: Optional[dict] = None) -> ResponseEnvelope:
    """A write reported success but the row could not be read back."""
    return ResponseEnvelope(code=404, message=message, data={**(data or {}), "orphaned": True})


def conflict(message: str, data: Any = None) -> ResponseEnvelope:
    return ResponseEnvelope(code=409, message=message, data=data)


def server_error(message: str, data: Any = None) -> ResponseEnvelope:
    return ResponseEnvelope(code=500, message=message, data=data)
