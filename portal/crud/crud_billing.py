# portal/crud/crud_billing.py
from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.exceptions import DuplicateConflict, StorageError
from portal.modules.companies.models import Company
from portal.modules.companies.schemas import BillableCompany
from portal.modules.payments.models import Payment, STATUS_PENDING


def is_billable(company: BillableCompany) -> bool:
    """Valor de contrato positivo e data de início definida (status não importa)."""
    return (
        company.contract_value is not None
        and company.contract_value > 0
        and company.start_date is not None
    )


async def list_billable_companies(db: AsyncSession) -> list[BillableCompany]:
    # inclui empresas encerradas: o histórico até end_date continua valendo
    stmt = (
        select(Company)
        .where(
            and_(
                Company.contract_value.is_not(None),
                Company.contract_value > 0,
                Company.start_date.is_not(None),
            )
        )
        .order_by(Company.id.asc())
    )
    try:
        res = await db.execute(stmt)
    except SQLAlchemyError as exc:
        raise StorageError(f"Falha ao listar empresas: {exc}") from exc
    companies = [BillableCompany.model_validate(obj) for obj in res.scalars().all()]
    return [c for c in companies if is_billable(c)]


async def get_company(db: AsyncSession, company_id: int) -> BillableCompany | None:
    try:
        res = await db.execute(select(Company).where(Company.id == company_id))
    except SQLAlchemyError as exc:
        raise StorageError(f"Falha ao buscar empresa {company_id}: {exc}") from exc
    obj = res.scalar_one_or_none()
    return BillableCompany.model_validate(obj) if obj else None


async def find_payment_on(db: AsyncSession, company_id: int, due_date: date) -> int | None:
    """Pagamento da empresa com vencimento exatamente em `due_date` (id ou None)."""
    stmt = (
        select(Payment.id)
        .where(and_(Payment.company_id == company_id, Payment.due_date == due_date))
        .limit(1)
    )
    try:
        return await db.scalar(stmt)
    except SQLAlchemyError as exc:
        raise StorageError(f"Falha ao consultar pagamentos da empresa {company_id}: {exc}") from exc


async def find_payment_in_month(
    db: AsyncSession,
    company_id: int,
    month_start: date,
    month_end: date,
) -> int | None:
    """Qualquer pagamento da empresa com vencimento dentro do mês (gerado ou lançado à mão)."""
    stmt = (
        select(Payment.id)
        .where(
            and_(
                Payment.company_id == company_id,
                Payment.due_date >= month_start,
                Payment.due_date <= month_end,
            )
        )
        .limit(1)
    )
    try:
        return await db.scalar(stmt)
    except SQLAlchemyError as exc:
        raise StorageError(f"Falha ao consultar pagamentos da empresa {company_id}: {exc}") from exc


async def insert_payment(
    db: AsyncSession,
    *,
    company_id: int,
    amount: Decimal,
    due_date: date,
    billing_period: str,
    payment_method: str,
    notes: str,
) -> Payment:
    obj = Payment(
        company_id=company_id,
        amount=amount,
        due_date=due_date,
        status=STATUS_PENDING,
        payment_method=payment_method,
        notes=notes,
        billing_period=billing_period,
    )
    db.add(obj)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateConflict(
            f"Pagamento já existe para empresa {company_id} em {billing_period}"
        ) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageError(f"Falha ao inserir pagamento da empresa {company_id}: {exc}") from exc
    return obj
