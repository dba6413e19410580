from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.models.base import OrganizationScopedBase


class UsageRecord(OrganizationScopedBase):
    __tablename__ = "saas_analytics"

    period: Mapped[str] = mapped_column(String(20), nullable=False, default="daily")
    recorded_on: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    storage_used_gb: Mapped[float] = mapped_column(Numeric(10, 3, asdecimal=False), nullable=False, default=0)
