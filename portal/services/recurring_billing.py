# portal/services/recurring_billing.py
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.core.exceptions import DuplicateConflict, StorageError, ValidationError
from portal.core.logging import get_logger
from portal.crud import crud_billing
from portal.modules.companies.schemas import BillableCompany
from portal.modules.payments.schemas import RecurringRunOut
from portal.services.schedule import (
    Candidate,
    Frequency,
    expand_schedule,
    last_day_of_month,
)

logger = get_logger(__name__)


class CommitOutcome(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"


def billing_today() -> date:
    """'Hoje' no fuso da agência (o job roda a qualquer hora do dia)."""
    return datetime.now(ZoneInfo(settings.BILLING_TIMEZONE)).date()


async def _already_billed(
    db: AsyncSession,
    company: BillableCompany,
    frequency: Frequency,
    candidate: Candidate,
) -> bool:
    if frequency.is_installment:
        found = await crud_billing.find_payment_on(db, company.id, candidate.due_date)
    else:
        month_start = candidate.cycle_start
        month_end = month_start.replace(
            day=last_day_of_month(month_start.year, month_start.month)
        )
        found = await crud_billing.find_payment_in_month(
            db, company.id, month_start, month_end
        )
    return found is not None


async def commit_candidate(
    db: AsyncSession,
    company: BillableCompany,
    frequency: Frequency,
    candidate: Candidate,
) -> CommitOutcome:
    """Insere o candidato como 'Pending' se ainda não houver cobrança para o período."""
    if await _already_billed(db, company, frequency, candidate):
        return CommitOutcome.SKIPPED

    try:
        payment = await crud_billing.insert_payment(
            db,
            company_id=company.id,
            amount=candidate.amount,
            due_date=candidate.due_date,
            billing_period=candidate.billing_period,
            payment_method=settings.BILLING_DEFAULT_METHOD,
            notes=settings.BILLING_AUTO_NOTE,
        )
    except DuplicateConflict:
        # período já gravado (corrida entre execuções ou vencimento empurrado p/ o mês seguinte)
        logger.info(
            "recurring_billing.duplicate_skipped",
            company_id=company.id,
            billing_period=candidate.billing_period,
        )
        return CommitOutcome.SKIPPED

    logger.debug(
        "recurring_billing.payment_created",
        company_id=company.id,
        payment_id=payment.id,
        due_date=candidate.due_date.isoformat(),
        amount=str(candidate.amount),
    )
    return CommitOutcome.CREATED


async def run_recurring_billing(
    db: AsyncSession,
    today: date | None = None,
) -> RecurringRunOut:
    """
    Varre as empresas elegíveis e gera as cobranças que faltam.
    - Idempotente: uma segunda execução seguida não cria nada.
    - Falha de uma empresa não interrompe as demais; vira um aviso no resumo.
    """
    today = today or billing_today()
    summary = RecurringRunOut()

    try:
        companies = await crud_billing.list_billable_companies(db)
    except StorageError as exc:
        logger.error("recurring_billing.list_failed", error=str(exc))
        summary.warnings.append(str(exc))
        return summary

    for company in companies:
        # o que já foi gravado entra no resumo mesmo se a empresa falhar no meio
        try:
            frequency = Frequency.parse(company.payment_frequency)
            for candidate in expand_schedule(company, today):
                outcome = await commit_candidate(db, company, frequency, candidate)
                if outcome is CommitOutcome.CREATED:
                    summary.created += 1
                else:
                    summary.skipped += 1
        except ValidationError as exc:
            logger.warning(
                "recurring_billing.company_invalid",
                company_id=company.id,
                company=company.name,
                error=str(exc),
            )
            summary.warnings.append(f"{company.name}: {exc}")
        except StorageError as exc:
            logger.error(
                "recurring_billing.company_aborted",
                company_id=company.id,
                company=company.name,
                error=str(exc),
            )
            summary.warnings.append(f"{company.name}: {exc}")

    if summary.created > 0:
        summary.message = f"{summary.created} cobrança(s) gerada(s) automaticamente"

    logger.info(
        "recurring_billing.finished",
        today=today.isoformat(),
        companies=len(companies),
        created=summary.created,
        skipped=summary.skipped,
        warnings=len(summary.warnings),
    )
    return summary


def preview_company_schedule(
    company: BillableCompany,
    today: date | None = None,
) -> list[Candidate]:
    """Candidatos da empresa sem gravar nada (simulação)."""
    return list(expand_schedule(company, today or billing_today()))
