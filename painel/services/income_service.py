"""
Serviço de Receitas.

Responsabilidades:
- Ciclo de vida da parcela (pendente → pago, e estorno)
- Status e total da receita derivados das parcelas
- Totais por status
- Validação antes de persistir
- Filtros da pesquisa de itens de receita
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from painel.errors import InvalidInputError
from painel.models.financial_models import DateRange, RecordSummary, StatusTotal
from painel.models.records import IncomeItem, IncomeRecord, ItemStatus, aggregate_status
from painel.services.payment_matcher import references_bank
from painel.utils.coercion import sum_values, to_decimal

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "value",
    "due_date",
    "payment_method_id",
    "payment_detail",
    "description",
    "installment",
    "total_installments",
    "interest_rate",
}


# ─── Ciclo de vida da parcela ───

def record_payment(item: IncomeItem, payment_date: Optional[date] = None) -> IncomeItem:
    """Dá baixa na parcela. Sem data informada, usa hoje."""
    item.payment_date = payment_date or date.today()
    item.status = ItemStatus.PAGO
    logger.info("Parcela %s paga em %s", item.id, item.payment_date.isoformat())
    return item


def clear_payment(item: IncomeItem) -> IncomeItem:
    """Estorna a baixa: volta para pendente sem data de pagamento."""
    item.payment_date = None
    item.status = ItemStatus.PENDENTE
    logger.info("Baixa da parcela %s removida", item.id)
    return item


def update_item(item: IncomeItem, **changes) -> IncomeItem:
    """
    Edita campos da parcela sem alterar o status.

    Raises:
        InvalidInputError: campo não editável ou valor não positivo
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise InvalidInputError(
            f"Campos não editáveis: {', '.join(sorted(unknown))}"
        )
    if "value" in changes:
        value = to_decimal(changes["value"])
        if value <= 0:
            raise InvalidInputError("O valor da parcela deve ser maior que zero")
        changes["value"] = value

    for name, value in changes.items():
        setattr(item, name, value)
    return item


# ─── Agregação da receita ───

def recompute_record_status(items: list[IncomeItem]) -> RecordSummary:
    """Recalcula status e total de uma receita a partir das parcelas."""
    return RecordSummary(
        status=aggregate_status(items),
        total=sum_values(item.value for item in items),
    )


def summarize_items_by_status(items: Iterable[IncomeItem]) -> dict[ItemStatus, StatusTotal]:
    """Soma e conta parcelas por status."""
    totals = {status: StatusTotal() for status in ItemStatus}
    for item in items:
        bucket = totals[item.status]
        bucket.value += to_decimal(item.value)
        bucket.count += 1
    return totals


# ─── Validação ───

def validate_item(item: IncomeItem, position: int = 1):
    """
    Raises:
        InvalidInputError: parcela sem forma de pagamento, vencimento ou valor
    """
    if not item.payment_method_id:
        raise InvalidInputError(
            f"Selecione a forma de pagamento da parcela {position}",
            code="forma_pagamento_obrigatoria",
        )
    if item.due_date is None:
        raise InvalidInputError(
            f"Informe a data de vencimento da parcela {position}",
            code="vencimento_obrigatorio",
        )
    if to_decimal(item.value) <= 0:
        raise InvalidInputError(
            f"O valor da parcela {position} deve ser maior que zero",
            code="valor_invalido",
        )


def validate_record_for_persistence(record: IncomeRecord):
    """
    Valida uma receita antes de gravar.

    Raises:
        InvalidInputError: receita sem parcelas ou com parcela incompleta
    """
    if not record.items:
        raise InvalidInputError("A receita precisa de pelo menos uma parcela", code="sem_parcelas")
    for position, item in enumerate(record.items, start=1):
        validate_item(item, position)


# ─── Pesquisa de itens ───

def _matches_term(item: IncomeItem, term: str, proposal_codes: dict) -> bool:
    haystack = [
        item.client.name if item.client else "",
        proposal_codes.get(item.record_id, ""),
        item.description or "",
    ]
    return any(term in (text or "").lower() for text in haystack)


def filter_income_items(
    items: Iterable[IncomeItem],
    status: Optional[ItemStatus] = None,
    payment_method_id: Optional[str] = None,
    due_range: Optional[DateRange] = None,
    min_value: Optional[Decimal] = None,
    max_value: Optional[Decimal] = None,
    client_id: Optional[str] = None,
    category_id: Optional[str] = None,
    bank_id: Optional[str] = None,
    term: Optional[str] = None,
    proposal_codes: Optional[dict] = None,
) -> list[IncomeItem]:
    """
    Aplica os filtros da pesquisa de itens de receita.

    Args:
        proposal_codes: mapa record_id → código da proposta, para a busca textual

    Returns:
        Itens filtrados, ordenados por vencimento decrescente
    """
    term = (term or "").strip().lower()
    proposal_codes = proposal_codes or {}
    result = []

    for item in items:
        if status is not None and item.status != status:
            continue
        if payment_method_id and item.payment_method_id != payment_method_id:
            continue
        if due_range is not None and not due_range.contains(item.due_date):
            continue
        value = to_decimal(item.value)
        if min_value is not None and value < to_decimal(min_value):
            continue
        if max_value is not None and value > to_decimal(max_value):
            continue
        if client_id and (item.client is None or item.client.id != client_id):
            continue
        if category_id and item.category_id != category_id:
            continue
        if bank_id and not references_bank(item.payment_detail, bank_id):
            continue
        if term and not _matches_term(item, term, proposal_codes):
            continue
        result.append(item)

    # sem vencimento vai para o fim
    result.sort(key=lambda i: (i.due_date is not None, i.due_date or date.min), reverse=True)
    return result
