from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Integer, String, Date, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.base import Base, TimestampMixin

STATUS_CHOICES = ("ativo", "pausado", "encerrado")


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # informativo: empresas encerradas continuam sendo cobradas até end_date
    status: Mapped[str | None] = mapped_column(String(20), nullable=True, default="ativo")

    # valor cobrado por ciclo (Decimal p/ dinheiro)
    contract_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # "Weekly" | "Biweekly" | "Monthly" | ... (aceita também os rótulos em português)
    payment_frequency: Mapped[str | None] = mapped_column(String(20), nullable=True)
