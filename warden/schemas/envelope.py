"""Uniform response envelope shared by every endpoint."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """{status, message, data?}; status is OK on success and ERROR otherwise."""

    status: Literal["OK", "ERROR"] = "OK"
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    status: Literal["ERROR"] = "ERROR"
    message: str
    detail: Any | None = Field(default=None, description="Only present in debug mode for unexpected errors")
