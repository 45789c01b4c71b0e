"""
Modelos de dados financeiros.
Dataclasses tipadas para resultados de cálculos do painel.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from painel.models.records import ItemStatus

ZERO = Decimal("0")


# ─── Período ───

@dataclass(frozen=True)
class DateRange:
    """Intervalo fechado de datas [start, end]."""
    start: date
    end: date

    def contains(self, day: Optional[date]) -> bool:
        return day is not None and self.start <= day <= self.end


# ─── Receitas ───

@dataclass
class RecordSummary:
    """Status e total recalculados de uma receita."""
    status: ItemStatus
    total: Decimal = ZERO


@dataclass
class StatusTotal:
    """Soma e quantidade de parcelas em um status."""
    value: Decimal = ZERO
    count: int = 0


# ─── Conformidade fiscal ───

class Severity(str, Enum):
    OK = "ok"
    ALERTA = "alerta"
    PERIGO = "perigo"


@dataclass
class ConformanceResult:
    """Resultado de um confronto fiscal (notas x movimentação)."""
    numerator: Decimal = ZERO
    denominator: Decimal = ZERO
    percentage: int = 0
    severity: Severity = Severity.OK
    count_considered: int = 0
    # Razão sem limite; > 100 indica excesso de notas
    raw_ratio: Optional[Decimal] = None

    @property
    def is_applicable(self) -> bool:
        """False quando não houve movimentação para confrontar."""
        return self.denominator > 0

    @property
    def is_over_compliant(self) -> bool:
        return self.raw_ratio is not None and self.raw_ratio > 100


@dataclass
class FiscalSummary:
    """Resumo fiscal do período (cards de status)."""
    revenue: ConformanceResult
    expense: ConformanceResult
    period_profit: Decimal = ZERO


@dataclass
class FiscalSplit:
    """Despesas pagas separadas entre fiscais e não fiscais."""
    fiscal_total: Decimal = ZERO
    fiscal_count: int = 0
    non_fiscal_total: Decimal = ZERO
    non_fiscal_count: int = 0


@dataclass
class BankTotal:
    """Receita recebida em um banco PJ."""
    bank_id: str
    bank_name: str
    amount: Decimal = ZERO
    count: int = 0


# ─── Estatísticas do período ───

@dataclass
class CategoryTotal:
    """Total por categoria."""
    name: str
    amount: Decimal = ZERO


@dataclass
class FlowPoint:
    """Linha de receita vs despesa mensal."""
    period: str  # ex: "out/26"
    month_key: str  # ex: "2026-10"
    income: Decimal = ZERO
    expense: Decimal = ZERO
    balance: Decimal = ZERO


@dataclass
class Transaction:
    """Movimentação no formato uniforme usado pelos feeds."""
    id: str
    kind: str  # "receita" ou "despesa"
    description: str
    value: Decimal
    date: date
    due_date: date
    status: str


@dataclass
class MonthStats:
    """Estatísticas do mês selecionado."""
    month_key: str
    month_label: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    profit: Decimal = ZERO
    pending_income: Decimal = ZERO
    pending_expense: Decimal = ZERO
    previous_income: Decimal = ZERO
    previous_expense: Decimal = ZERO
    income_growth: int = 0
    expense_growth: int = 0
    profit_growth: int = 0
    balance: Decimal = ZERO
    income_by_category: list[CategoryTotal] = field(default_factory=list)
    expense_by_category: list[CategoryTotal] = field(default_factory=list)


@dataclass
class MonthOption:
    """Opção do seletor de mês."""
    value: str  # "MM/YYYY"
    label: str  # "outubro 2026"
