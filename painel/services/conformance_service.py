"""
Serviço de Confronto Fiscal.

Cruza a movimentação com as notas fiscais do período:
- Receitas: notas emitidas x receita de clientes PJ recebida no banco jurídico
- Despesas: notas recebidas x despesas pagas em categorias não fiscais

Classificação (limiares compartilhados):
- ok      → percentual >= 100 (ou nada a confrontar)
- alerta  → 90 <= percentual < 100
- perigo  → percentual < 90
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from painel.config import (
    CONFORMANCE_ALERT,
    CONFORMANCE_OK,
    UNSET_FISCAL_IS_FISCAL,
)
from painel.models.financial_models import (
    BankTotal,
    ConformanceResult,
    DateRange,
    FiscalSplit,
    FiscalSummary,
    Severity,
)
from painel.models.records import (
    Bank,
    Expense,
    IncomeItem,
    IssuedInvoice,
    ReceivedInvoice,
)
from painel.services.payment_matcher import references_bank
from painel.utils.coercion import ZERO, round_half_up, sum_values, to_decimal

logger = logging.getLogger(__name__)


# ─── Classificação ───

def classify_severity(percentage: int, denominator: Decimal = None) -> Severity:
    """Classifica o percentual de conformidade. Denominador zero é 'ok'."""
    if denominator is not None and to_decimal(denominator) == 0:
        return Severity.OK
    if percentage >= CONFORMANCE_OK:
        return Severity.OK
    if percentage >= CONFORMANCE_ALERT:
        return Severity.ALERTA
    return Severity.PERIGO


def _build_result(numerator: Decimal, denominator: Decimal, count: int) -> ConformanceResult:
    if denominator > 0:
        raw_ratio = numerator / denominator * 100
        percentage = max(0, min(CONFORMANCE_OK, round_half_up(raw_ratio)))
    else:
        raw_ratio = None
        percentage = 0

    return ConformanceResult(
        numerator=numerator,
        denominator=denominator,
        percentage=percentage,
        severity=classify_severity(percentage, denominator),
        count_considered=count,
        raw_ratio=raw_ratio,
    )


# ─── Filtros ───

def _is_legal_entity_item(item: IncomeItem) -> bool:
    return item.client is not None and item.client.is_legal_entity


def _is_non_fiscal(expense: Expense, unset_is_fiscal: bool) -> bool:
    category = expense.category
    flag = category.is_fiscal if category is not None else None
    if flag is None:
        return not unset_is_fiscal
    return flag is False


def _paid_in_range(expenses: Iterable[Expense], date_range: DateRange) -> list[Expense]:
    return [
        e for e in expenses
        if e.is_paid and date_range.contains(e.launch_date)
    ]


def _paid_items_in_range(items: Iterable[IncomeItem], date_range: DateRange) -> list[IncomeItem]:
    return [
        i for i in items
        if i.is_paid and date_range.contains(i.due_date)
    ]


# ─── Receitas ───

def compute_revenue_conformance(
    income_items: list[IncomeItem],
    issued_invoices: list[IssuedInvoice],
    legal_bank_id: str,
    date_range: DateRange,
) -> ConformanceResult:
    """
    Conformidade de receitas: notas emitidas / receita PJ no banco jurídico.

    Args:
        income_items: parcelas com `client` resolvido
        issued_invoices: notas fiscais emitidas
        legal_bank_id: banco que recebe os pagamentos de clientes PJ
        date_range: período (vencimento das parcelas, emissão das notas)
    """
    legal_items = [
        i for i in _paid_items_in_range(income_items, date_range)
        if _is_legal_entity_item(i)
    ]
    routed = [
        i for i in legal_items
        if references_bank(i.payment_detail, legal_bank_id)
    ]
    logger.debug(
        "Receitas PJ no período: %d; no banco jurídico: %d",
        len(legal_items), len(routed),
    )

    bank_routed_revenue = sum_values(i.value for i in routed)
    issued_total = sum_values(
        n.value for n in issued_invoices if date_range.contains(n.issue_date)
    )

    result = _build_result(issued_total, bank_routed_revenue, len(routed))
    if result.severity != Severity.OK:
        logger.warning(
            "Receitas com nota em %d%% (%s) entre %s e %s",
            result.percentage, result.severity.value,
            date_range.start, date_range.end,
        )
    return result


# ─── Despesas ───

def split_expenses_by_fiscal(
    expenses: Iterable[Expense],
    date_range: DateRange,
    unset_fiscal_is_fiscal: bool = UNSET_FISCAL_IS_FISCAL,
) -> FiscalSplit:
    """Separa as despesas pagas do período entre fiscais e não fiscais."""
    split = FiscalSplit()
    for expense in _paid_in_range(expenses, date_range):
        value = to_decimal(expense.value)
        if _is_non_fiscal(expense, unset_fiscal_is_fiscal):
            split.non_fiscal_total += value
            split.non_fiscal_count += 1
        else:
            split.fiscal_total += value
            split.fiscal_count += 1
    return split


def compute_expense_conformance(
    expenses: list[Expense],
    received_invoices: list[ReceivedInvoice],
    date_range: DateRange,
    unset_fiscal_is_fiscal: bool = UNSET_FISCAL_IS_FISCAL,
) -> ConformanceResult:
    """
    Conformidade de despesas: notas recebidas / despesas não fiscais pagas.

    Args:
        expenses: despesas com `category` resolvida
        received_invoices: notas recebidas (valor total pode vir como string)
        date_range: período (lançamento das despesas, emissão das notas)
        unset_fiscal_is_fiscal: como tratar categoria sem a marcação fiscal
    """
    non_fiscal = [
        e for e in _paid_in_range(expenses, date_range)
        if _is_non_fiscal(e, unset_fiscal_is_fiscal)
    ]
    non_fiscal_total = sum_values(e.value for e in non_fiscal)
    received_total = sum_values(
        n.total_value for n in received_invoices if date_range.contains(n.issue_date)
    )

    result = _build_result(received_total, non_fiscal_total, len(non_fiscal))
    if result.severity != Severity.OK:
        logger.warning(
            "Despesas com nota em %d%% (%s) entre %s e %s",
            result.percentage, result.severity.value,
            date_range.start, date_range.end,
        )
    return result


# ─── Resumo ───

def compute_fiscal_summary(
    income_items: list[IncomeItem],
    expenses: list[Expense],
    issued_invoices: list[IssuedInvoice],
    received_invoices: list[ReceivedInvoice],
    legal_bank_id: str,
    date_range: DateRange,
    unset_fiscal_is_fiscal: bool = UNSET_FISCAL_IS_FISCAL,
) -> FiscalSummary:
    """Cards de status fiscal mais o lucro do período (receitas pagas - despesas pagas)."""
    revenue = compute_revenue_conformance(
        income_items, issued_invoices, legal_bank_id, date_range
    )
    expense = compute_expense_conformance(
        expenses, received_invoices, date_range, unset_fiscal_is_fiscal
    )
    income_total = sum_values(i.value for i in _paid_items_in_range(income_items, date_range))
    expense_total = sum_values(e.value for e in _paid_in_range(expenses, date_range))

    return FiscalSummary(
        revenue=revenue,
        expense=expense,
        period_profit=income_total - expense_total,
    )


def compute_legal_bank_total(
    income_items: Iterable[IncomeItem],
    bank: Bank,
    date_range: Optional[DateRange] = None,
) -> BankTotal:
    """Total de parcelas pagas recebidas no banco jurídico (sem filtro de cliente)."""
    total = BankTotal(bank_id=bank.id, bank_name=bank.name)
    for item in income_items:
        if not item.is_paid:
            continue
        if date_range is not None and not date_range.contains(item.due_date):
            continue
        if references_bank(item.payment_detail, bank.id):
            total.amount += to_decimal(item.value)
            total.count += 1
    if total.amount == ZERO:
        logger.debug("Nenhuma parcela paga encontrada no banco %s", bank.name)
    return total
