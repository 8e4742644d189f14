from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Integer,
    String,
    Date,
    ForeignKey,
    Numeric,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from portal.db.base import Base, TimestampMixin
from portal.modules.companies.models import Company

STATUS_PENDING = "Pending"
STATUS_CHOICES = (STATUS_PENDING, "Paid", "Late")


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"

    __table_args__ = (
        # 1 cobrança gerada por período (competência) por empresa
        UniqueConstraint(
            "company_id",
            "billing_period",
            name="uq_payment_billing_period_per_company",
        ),
        CheckConstraint(
            f"status in {STATUS_CHOICES}",
            name="ck_payment_status_valido",
        ),
        # lookups por data exata e por intervalo do mês
        Index("ix_payment_company_due_date", "company_id", "due_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    company_id: Mapped[int] = mapped_column(
        ForeignKey(f"{Company.__tablename__}.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # vencimento (sempre dia útil quando gerado automaticamente)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[str] = mapped_column(String(16), default=STATUS_PENDING, nullable=False)

    # pix/boleto/cartao/transferencia
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)

    notes: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # "YYYY-MM" (mensal ou maior) ou "YYYY-MM-DD" (semanal/quinzenal);
    # NULL para pagamentos lançados fora do gerador
    billing_period: Mapped[str | None] = mapped_column(String(10), nullable=True)
