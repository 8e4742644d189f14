# portal/modules/payments/schemas.py
from __future__ import annotations
from typing import Optional, List
from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field, field_serializer


class RecurringRunOut(BaseModel):
    created: int = 0
    skipped: int = 0
    warnings: List[str] = Field(default_factory=list)
    # aviso não bloqueante para a UI (só quando created > 0)
    message: Optional[str] = None


class CandidateOut(BaseModel):
    due_date: date
    amount: Decimal
    billing_period: str

    @field_serializer("amount")
    def _serialize_amount(self, v: Decimal, _info):
        return float(v)


class SchedulePreviewOut(BaseModel):
    company_id: int
    frequency: str
    items: List[CandidateOut]
    total: int
