from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
import uuid


def new_request_id() -> str:
    """Opaque id echoed in every envelope so client reports can be matched to logs."""
    return uuid.uuid4().hex


class SuccessResponse(BaseModel):
    """Envelope for every 2xx body: `data` holds the payload."""
    success: bool = True
    request_id: str = Field(default_factory=new_request_id)
    data: Optional[Any] = None


class ErrorDetail(BaseModel):
    code: str
    message: Any
    kind: Optional[str] = None
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Envelope for every error body; `error.code` is stable, `error.message` is for humans."""
    success: bool = False
    request_id: str = Field(default_factory=new_request_id)
    error: ErrorDetail

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
