from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class UserCreateRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str = Field(min_length=1, max_length=255)
    role: Literal["admin", "manager", "user"] = "user"


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    status: str
