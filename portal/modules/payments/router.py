# portal/modules/payments/router.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.dependencies import get_db
from portal.core.exceptions import StorageError, ValidationError
from portal.crud import crud_billing
from portal.services.recurring_billing import preview_company_schedule, run_recurring_billing
from portal.services.schedule import Frequency
from .schemas import CandidateOut, RecurringRunOut, SchedulePreviewOut

router = APIRouter(tags=["Financeiro - Cobranças recorrentes"])


@router.post("/recurring/run", response_model=RecurringRunOut)
async def run_recurring(
    today: date | None = Query(None, description="YYYY-MM-DD (default: hoje no fuso da agência)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Gera as cobranças recorrentes que faltam para todas as empresas elegíveis.
    Pode ser chamado a cada carregamento de tela: execuções repetidas não duplicam nada.
    """
    return await run_recurring_billing(db, today=today)


@router.get("/recurring/preview/{company_id}", response_model=SchedulePreviewOut)
async def preview_recurring(
    company_id: int = Path(..., gt=0),
    today: date | None = Query(None, description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    try:
        company = await crud_billing.get_company(db, company_id)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    if not company:
        raise HTTPException(status_code=404, detail="Empresa não encontrada")

    try:
        frequency = Frequency.parse(company.payment_frequency)
        candidates = preview_company_schedule(company, today)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    items = [
        CandidateOut(due_date=c.due_date, amount=c.amount, billing_period=c.billing_period)
        for c in candidates
    ]
    return SchedulePreviewOut(
        company_id=company.id,
        frequency=frequency.value,
        items=items,
        total=len(items),
    )
