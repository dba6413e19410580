from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    client: str | None = Field(default=None, max_length=255)
    status: str = Field(default="planning", max_length=30)
    budget: Decimal | None = Field(default=None, ge=0)


class ProjectResponse(BaseModel):
    id: int
    name: str
    client: str | None = None
    status: str
    budget: Decimal | None = None
