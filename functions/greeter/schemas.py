"""
Pydantic schemas for request and response bodies.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, StrictStr


class GreetingResponse(BaseModel):
    message: str


class UpdateNamePayload(BaseModel):
    name: StrictStr = Field(..., min_length=1)


class UpdateNameResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str


class ErrorResponse(BaseModel):
    error: str


class StatusErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
