from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.models.base import OrganizationScopedBase


class Project(OrganizationScopedBase):
    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    client: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="planning")
    budget: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
