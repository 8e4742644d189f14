# portal/modules/companies/schemas.py
from __future__ import annotations
from typing import Optional
from datetime import date
from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class BillableCompany(BaseModel):
    """Retrato imutável da empresa usado durante a geração (desacoplado da sessão ORM)."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    status: Optional[str] = None
    contract_value: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    payment_frequency: Optional[str] = None
