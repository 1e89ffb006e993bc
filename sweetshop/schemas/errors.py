"""Error response body shared by every endpoint."""

from pydantic import BaseModel, Field


class FieldErrorItem(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """JSON body of every non-2xx response."""

    message: str = Field(..., description="Human-readable summary")
    errors: list[FieldErrorItem] | None = Field(
        default=None,
        description="Per-field details, present for validation failures only",
    )
