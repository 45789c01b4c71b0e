"""
Serviço de Estatísticas do Período.

Responsabilidades:
- Totais do mês e crescimento sobre o mês anterior
- Receitas/despesas por categoria
- Fluxo mensal (últimos N meses)
- Saldo acumulado
- Feeds de transações recentes e pendentes
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Union

import pandas as pd

from painel.config import (
    AVAILABLE_MONTHS,
    CATEGORY_TOP_N,
    FLOW_MONTHS,
    PENDING_LIMIT,
    RECENT_LIMIT,
)
from painel.models.financial_models import (
    CategoryTotal,
    DateRange,
    FlowPoint,
    MonthOption,
    MonthStats,
    Transaction,
)
from painel.models.records import Expense, ExpenseStatus, IncomeItem, ItemStatus
from painel.utils.coercion import ZERO, round_half_up, sum_values, to_decimal
from painel.utils.periods import (
    MONTH_NAMES_PT,
    long_label,
    month_key,
    month_range,
    parse_month,
    shift_months,
    short_label,
)

logger = logging.getLogger(__name__)

MonthRef = Union[date, str, None]

UNNAMED_CATEGORY = "Outros"
NO_CATEGORY = "Sem categoria"


def _resolve_month(month: MonthRef, today: Optional[date] = None) -> date:
    if isinstance(month, date):
        return month.replace(day=1)
    return parse_month(month, today)


# ─── Totais ───

def month_total(
    records: Iterable[Any],
    period: DateRange,
    date_field: str,
    status_field: str = "status",
    status_value: str = "pago",
    value_field: str = "value",
) -> Decimal:
    """Soma os valores dos registros no status pedido com data dentro do período."""
    return sum_values(
        getattr(r, value_field)
        for r in records
        if getattr(r, status_field) == status_value
        and period.contains(getattr(r, date_field))
    )


def _income_total(items, period: DateRange, status: ItemStatus = ItemStatus.PAGO) -> Decimal:
    return month_total(items, period, "due_date", "status", status)


def _expense_total(expenses, period: DateRange, status: ExpenseStatus = ExpenseStatus.PAGO) -> Decimal:
    return month_total(expenses, period, "launch_date", "payment_status", status)


def growth_percentage(current: Decimal, previous: Decimal) -> int:
    """Crescimento percentual arredondado; zero sem base positiva."""
    if previous <= 0:
        return 0
    return round_half_up((current - previous) / previous * 100)


def running_balance(income_items: Iterable[IncomeItem], expenses: Iterable[Expense]) -> Decimal:
    """Saldo de todo o histórico: receitas pagas - despesas pagas."""
    income = sum_values(i.value for i in income_items if i.status == ItemStatus.PAGO)
    expense = sum_values(e.value for e in expenses if e.payment_status == ExpenseStatus.PAGO)
    return income - expense


# ─── Categorias ───

def _category_name(category_id: Optional[str], category: Any) -> str:
    if not category_id and category is None:
        return NO_CATEGORY
    name = getattr(category, "name", "") if category is not None else ""
    return name or UNNAMED_CATEGORY


def category_breakdown(
    records: Iterable[Any],
    category_of: Callable[[Any], str],
    top_n: int = CATEGORY_TOP_N,
) -> list[CategoryTotal]:
    """Agrupa por nome de categoria, ordena do maior para o menor e mantém os top_n."""
    totals: dict[str, Decimal] = {}
    for record in records:
        name = category_of(record)
        totals[name] = totals.get(name, ZERO) + to_decimal(record.value)

    ordered = sorted(totals.items(), key=lambda x: x[1], reverse=True)
    return [CategoryTotal(name=name, amount=amount) for name, amount in ordered[:top_n]]


def income_by_category(items: Iterable[IncomeItem], period: DateRange, top_n: int = CATEGORY_TOP_N):
    paid = [i for i in items if i.status == ItemStatus.PAGO and period.contains(i.due_date)]
    return category_breakdown(paid, lambda i: _category_name(i.category_id, i.category), top_n)


def expense_by_category(expenses: Iterable[Expense], period: DateRange, top_n: int = CATEGORY_TOP_N):
    paid = [
        e for e in expenses
        if e.payment_status == ExpenseStatus.PAGO and period.contains(e.launch_date)
    ]
    return category_breakdown(paid, lambda e: _category_name(e.category_id, e.category), top_n)


# ─── Estatísticas do mês ───

def compute_month_stats(
    income_items: list[IncomeItem],
    expenses: list[Expense],
    month: MonthRef = None,
    today: Optional[date] = None,
) -> MonthStats:
    """
    Estatísticas do mês selecionado (padrão: mês corrente).

    Args:
        income_items: parcelas de receita (data de referência: vencimento)
        expenses: despesas (data de referência: lançamento)
        month: date de qualquer dia do mês ou seletor "MM/YYYY"
    """
    reference = _resolve_month(month, today)
    current = month_range(reference)
    previous = month_range(shift_months(reference, -1))

    income = _income_total(income_items, current)
    expense = _expense_total(expenses, current)
    previous_income = _income_total(income_items, previous)
    previous_expense = _expense_total(expenses, previous)
    profit = income - expense

    stats = MonthStats(
        month_key=month_key(reference),
        month_label=long_label(reference),
        income=income,
        expense=expense,
        profit=profit,
        pending_income=_income_total(income_items, current, ItemStatus.PENDENTE),
        pending_expense=_expense_total(expenses, current, ExpenseStatus.PENDENTE),
        previous_income=previous_income,
        previous_expense=previous_expense,
        income_growth=growth_percentage(income, previous_income),
        expense_growth=growth_percentage(expense, previous_expense),
        profit_growth=growth_percentage(profit, previous_income - previous_expense),
        balance=running_balance(income_items, expenses),
        income_by_category=income_by_category(income_items, current),
        expense_by_category=expense_by_category(expenses, current),
    )
    logger.debug("Estatísticas de %s: receitas %s, despesas %s", stats.month_key, income, expense)
    return stats


# ─── Fluxo mensal ───

def compute_rolling_flow(
    income_items: list[IncomeItem],
    expenses: list[Expense],
    months: int = FLOW_MONTHS,
    month: MonthRef = None,
    today: Optional[date] = None,
) -> list[FlowPoint]:
    """Receitas pagas, despesas pagas e saldo dos últimos `months` meses (mais antigo primeiro)."""
    reference = _resolve_month(month, today)
    points = []
    for offset in range(months - 1, -1, -1):
        start = shift_months(reference, -offset)
        period = month_range(start)
        income = _income_total(income_items, period)
        expense = _expense_total(expenses, period)
        points.append(FlowPoint(
            period=short_label(start),
            month_key=month_key(start),
            income=income,
            expense=expense,
            balance=income - expense,
        ))
    return points


def flow_to_frame(points: list[FlowPoint]) -> pd.DataFrame:
    """DataFrame do fluxo mensal para os gráficos."""
    return pd.DataFrame(
        [
            {
                "period": p.period,
                "month_key": p.month_key,
                "income": float(p.income),
                "expense": float(p.expense),
                "balance": float(p.balance),
            }
            for p in points
        ],
        columns=["period", "month_key", "income", "expense", "balance"],
    )


# ─── Transações ───

def _income_transaction(item: IncomeItem, fallback: str) -> Transaction:
    return Transaction(
        id=str(item.id),
        kind="receita",
        description=item.description or fallback,
        value=to_decimal(item.value),
        date=item.due_date,
        due_date=item.due_date,
        status=item.status.value,
    )


def _expense_transaction(expense: Expense, fallback: str) -> Transaction:
    return Transaction(
        id=str(expense.id),
        kind="despesa",
        description=expense.description or fallback,
        value=to_decimal(expense.value),
        date=expense.launch_date,
        # Despesa não tem vencimento próprio
        due_date=expense.launch_date,
        status=expense.payment_status.value,
    )


def recent_transactions(
    income_items: list[IncomeItem],
    expenses: list[Expense],
    limit: int = RECENT_LIMIT,
    month: MonthRef = None,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Movimentações do mês, mais recentes primeiro."""
    period = month_range(_resolve_month(month, today))
    transactions = [
        _income_transaction(i, "Receita")
        for i in income_items if period.contains(i.due_date)
    ] + [
        _expense_transaction(e, "Despesa")
        for e in expenses if period.contains(e.launch_date)
    ]
    transactions.sort(key=lambda t: t.date, reverse=True)
    return transactions[:limit]


def pending_transactions(
    income_items: list[IncomeItem],
    expenses: list[Expense],
    limit: int = PENDING_LIMIT,
    month: MonthRef = None,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Movimentações pendentes do mês, vencimento mais próximo primeiro."""
    period = month_range(_resolve_month(month, today))
    transactions = [
        _income_transaction(i, "Receita Pendente")
        for i in income_items
        if i.status == ItemStatus.PENDENTE and period.contains(i.due_date)
    ] + [
        _expense_transaction(e, "Despesa Pendente")
        for e in expenses
        if e.payment_status == ExpenseStatus.PENDENTE and period.contains(e.launch_date)
    ]
    transactions.sort(key=lambda t: t.due_date)
    return transactions[:limit]


# ─── Seletor de mês ───

def available_months(today: Optional[date] = None, count: int = AVAILABLE_MONTHS) -> list[MonthOption]:
    """Opções "MM/YYYY" do mês corrente para trás."""
    today = today or date.today()
    options = []
    for offset in range(count):
        day = shift_months(today, -offset)
        options.append(MonthOption(
            value=day.strftime("%m/%Y"),
            label=f"{MONTH_NAMES_PT[day.month]} {day.year}",
        ))
    return options
