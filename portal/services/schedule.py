# portal/services/schedule.py
"""
Expansão do calendário de cobranças de uma empresa.

Tudo aqui é puro (sem banco): recebe o retrato da empresa e o "hoje" e
devolve os candidatos (vencimento, valor) em ordem de vencimento.
"""
from __future__ import annotations

import calendar as _cal
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_DOWN
from enum import Enum
from typing import Iterator

from portal.core.exceptions import ValidationError
from portal.modules.companies.schemas import BillableCompany

CENTS = Decimal("0.01")


class Frequency(str, Enum):
    WEEKLY = "Weekly"
    BIWEEKLY = "Biweekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    SEMIANNUAL = "Semiannual"
    ANNUAL = "Annual"

    @classmethod
    def parse(cls, raw: str | None) -> "Frequency":
        """Aceita o valor em inglês ou o rótulo do formulário ('Mensal', 'Semanal'...)."""
        if raw is None or not raw.strip():
            return cls.MONTHLY
        key = raw.strip().lower()
        for f in cls:
            if f.value.lower() == key:
                return f
        try:
            return _PT_LABELS[key]
        except KeyError:
            raise ValidationError(f"Frequência de pagamento desconhecida: {raw!r}") from None

    @property
    def is_installment(self) -> bool:
        """Semanal/quinzenal: várias parcelas dentro do ciclo mensal."""
        return cycle_plan(self).installments > 1


_PT_LABELS = {
    "semanal": Frequency.WEEKLY,
    "quinzenal": Frequency.BIWEEKLY,
    "mensal": Frequency.MONTHLY,
    "trimestral": Frequency.QUARTERLY,
    "semestral": Frequency.SEMIANNUAL,
    "anual": Frequency.ANNUAL,
}


@dataclass(frozen=True)
class CyclePlan:
    installments: int
    interval_days: int
    months_per_cycle: int


_PLANS: dict[Frequency, CyclePlan] = {
    Frequency.WEEKLY: CyclePlan(installments=4, interval_days=7, months_per_cycle=1),
    Frequency.BIWEEKLY: CyclePlan(installments=2, interval_days=15, months_per_cycle=1),
    Frequency.MONTHLY: CyclePlan(installments=1, interval_days=0, months_per_cycle=1),
    Frequency.QUARTERLY: CyclePlan(installments=1, interval_days=0, months_per_cycle=3),
    Frequency.SEMIANNUAL: CyclePlan(installments=1, interval_days=0, months_per_cycle=6),
    Frequency.ANNUAL: CyclePlan(installments=1, interval_days=0, months_per_cycle=12),
}


def cycle_plan(frequency: Frequency) -> CyclePlan:
    try:
        return _PLANS[frequency]
    except KeyError:
        raise ValidationError(f"Frequência sem plano de ciclo: {frequency!r}") from None


@dataclass(frozen=True)
class Candidate:
    due_date: date
    amount: Decimal
    # competência: "YYYY-MM" ou a data ISO da parcela (semanal/quinzenal)
    billing_period: str
    # início do mês de cobrança ao qual o candidato pertence
    cycle_start: date


# ---------- helpers de calendário ----------
def last_day_of_month(year: int, month: int) -> int:
    return _cal.monthrange(year, month)[1]


def add_months(d: date, months: int, day: int | None = None) -> date:
    """Soma meses a `d` caindo em `day` (default: d.day), clampado ao fim do mês."""
    total = d.year * 12 + (d.month - 1) + months
    y, m = divmod(total, 12)
    m += 1
    target_day = min(day or d.day, last_day_of_month(y, m))
    return date(y, m, target_day)


def next_cursor(cursor: date, start_day: int, months: int) -> date:
    """Próximo início de ciclo, sempre realinhado ao dia da data de início."""
    return add_months(cursor, months, day=start_day)


def next_business_day(d: date) -> date:
    """Sábado -> +2, domingo -> +1. Um único ajuste sempre cai numa segunda."""
    wd = d.weekday()
    if wd == 5:
        return d + timedelta(days=2)
    if wd == 6:
        return d + timedelta(days=1)
    return d


def split_amount(total: Decimal, count: int) -> list[Decimal]:
    """Divide o valor do ciclo em `count` parcelas; a sobra de centavos vai na última."""
    if count < 1:
        raise ValidationError("Quantidade de parcelas deve ser positiva")
    total = Decimal(total).quantize(CENTS)
    base = (total / count).quantize(CENTS, rounding=ROUND_DOWN)
    parts = [base] * count
    parts[-1] = total - base * (count - 1)
    return parts


def _period_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def _validate(company: BillableCompany) -> None:
    if company.contract_value is None or company.contract_value <= 0:
        raise ValidationError(
            f"Empresa {company.id} com valor de contrato inválido: {company.contract_value}"
        )
    if company.start_date is None:
        raise ValidationError(f"Empresa {company.id} sem data de início")
    if company.end_date is not None and company.end_date < company.start_date:
        raise ValidationError(
            f"Empresa {company.id} com encerramento ({company.end_date}) "
            f"anterior ao início ({company.start_date})"
        )


# ---------- expansão ----------
def expand_schedule(company: BillableCompany, today: date) -> Iterator[Candidate]:
    """
    Gera os candidatos (vencimento, valor) desde a data de início até o horizonte:
    - horizonte = end_date (se houver) ou `today`;
    - semanal/quinzenal: 4/2 parcelas por ciclo mensal, espaçadas 7/15 dias;
    - mensal/trimestral/semestral/anual: 1 cobrança por ciclo, valor cheio;
    - todo vencimento é empurrado para o próximo dia útil e descartado se passar do horizonte.
    """
    _validate(company)
    frequency = Frequency.parse(company.payment_frequency)
    plan = cycle_plan(frequency)

    start = company.start_date
    horizon = company.end_date or today
    amounts = split_amount(company.contract_value, plan.installments)

    cursor = start
    while cursor <= horizon:
        cycle_start = cursor.replace(day=1)

        if plan.installments > 1:
            for i, amount in enumerate(amounts):
                raw = cursor + timedelta(days=i * plan.interval_days)
                if raw > horizon:
                    break
                due = next_business_day(raw)
                if due > horizon:
                    break
                yield Candidate(
                    due_date=due,
                    amount=amount,
                    billing_period=due.isoformat(),
                    cycle_start=cycle_start,
                )
        else:
            due = next_business_day(cursor)
            if due > horizon:
                return
            yield Candidate(
                due_date=due,
                amount=amounts[0],
                billing_period=_period_key(cursor),
                cycle_start=cycle_start,
            )

        cursor = next_cursor(cursor, start.day, plan.months_per_cycle)
