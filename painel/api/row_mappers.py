"""
Conversão das linhas da base (JSON do PostgREST) em registros de domínio.

Campos relacionados chegam embutidos via select com joins, ex:
receitas_itens → receita:receita_id(cliente:cliente_id(...), categoria:categoria_id(...)).
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from painel.models.payment_details import payment_detail_from_dict
from painel.models.records import (
    Bank,
    Client,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    IncomeCategory,
    IncomeItem,
    IncomeRecord,
    ItemStatus,
    IssuedInvoice,
    PaymentCondition,
    Proposal,
    ProposalStatus,
    ReceivedInvoice,
)
from painel.utils.coercion import to_decimal

logger = logging.getLogger(__name__)


def parse_date(value: Any) -> Optional[date]:
    """Extrai a data de um valor ISO (data ou data-hora)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug("Data ilegível ignorada: %r", value)
        return None


def _enum(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


# ─── Cadastros ───

def client_from_row(row: Optional[dict]) -> Optional[Client]:
    if not row:
        return None
    return Client(
        id=row.get("id", ""),
        name=row.get("nome", "") or "",
        document=row.get("documento", "") or "",
    )


def bank_from_row(row: dict) -> Bank:
    return Bank(
        id=row["id"],
        name=row.get("nome", "") or "",
        code=row.get("codigo", "") or "",
        agency=row.get("agencia", "") or "",
        account=row.get("conta", "") or "",
        pix_key_type=row.get("tipo_chave_pix", "") or "",
        pix_key=row.get("chave_pix", "") or "",
        beneficiary_name=row.get("nome_favorecido", "") or "",
        beneficiary_type=row.get("tipo_favorecido", "") or "",
    )


def expense_category_from_row(row: Optional[dict]) -> Optional[ExpenseCategory]:
    if not row:
        return None
    return ExpenseCategory(
        id=row.get("id", ""),
        name=row.get("nome", "") or "",
        is_fiscal=row.get("despesa_fiscal"),
        is_fixed=row.get("despesa_fixa"),
    )


# ─── Propostas ───

def proposal_from_row(row: dict) -> Proposal:
    conditions = [
        PaymentCondition(
            id=c.get("id"),
            description=c.get("descricao", "") or "",
            percentage=to_decimal(c.get("percentual")),
            value=to_decimal(c.get("valor")),
            order=c.get("ordem") or 0,
        )
        for c in row.get("condicoes_pagamento") or []
    ]
    return Proposal(
        id=row["id"],
        code=row.get("codigo", "") or "",
        client_id=row.get("cliente_id", ""),
        total_value=to_decimal(row.get("valor_total")),
        status=_enum(ProposalStatus, row.get("status"), ProposalStatus.RASCUNHO),
        payment_conditions=conditions,
        title=row.get("titulo", "") or "",
        client=client_from_row(row.get("cliente")),
    )


# ─── Receitas ───

def income_item_from_row(row: dict) -> IncomeItem:
    record = row.get("receita") or {}
    category = record.get("categoria")
    method = row.get("forma_pagamento") or {}
    status = _enum(ItemStatus, row.get("status"), ItemStatus.PENDENTE)
    payment_date = parse_date(row.get("data_pagamento"))

    if status == ItemStatus.PAGO and payment_date is None:
        logger.debug("Parcela %s paga sem data de pagamento", row.get("id"))

    return IncomeItem(
        id=row.get("id"),
        record_id=row.get("receita_id"),
        value=to_decimal(row.get("valor")),
        due_date=parse_date(row.get("data_vencimento")),
        payment_method_id=row.get("forma_pagamento_id"),
        status=status,
        payment_date=payment_date,
        payment_condition_id=row.get("condicao_pagamento_id"),
        installment=row.get("parcela") or 1,
        total_installments=row.get("total_parcelas") or 1,
        interest_rate=to_decimal(row.get("taxa_juros")),
        payment_detail=payment_detail_from_dict(
            row.get("detalhes_pagamento"), method.get("nome")
        ),
        description=row.get("descricao"),
        order=row.get("ordem") or 0,
        client=client_from_row(record.get("cliente")),
        category=IncomeCategory(id=category["id"], name=category.get("nome", "") or "")
        if category else None,
        category_id=record.get("categoria_id"),
    )


def income_record_from_row(row: dict) -> IncomeRecord:
    category = row.get("categoria")
    return IncomeRecord(
        id=row["id"],
        client_id=row.get("cliente_id"),
        proposal_id=row.get("proposta_id"),
        category_id=row.get("categoria_id"),
        description=row.get("descricao", "") or "",
        notes=row.get("observacoes", "") or "",
        items=[income_item_from_row(i) for i in row.get("itens") or []],
        client=client_from_row(row.get("cliente")),
        category=IncomeCategory(id=category["id"], name=category.get("nome", "") or "")
        if category else None,
    )


# ─── Despesas e notas ───

def expense_from_row(row: dict) -> Expense:
    return Expense(
        id=row["id"],
        value=row.get("valor"),
        launch_date=parse_date(row.get("data_lancamento")),
        payment_status=_enum(ExpenseStatus, row.get("status_pagamento"), ExpenseStatus.PENDENTE),
        category_id=row.get("categoria_id"),
        category=expense_category_from_row(row.get("categoria")),
        description=row.get("descricao", "") or "",
        bank_id=row.get("banco_id"),
        payment_date=parse_date(row.get("data_pagamento")),
    )


def issued_invoice_from_row(row: dict) -> IssuedInvoice:
    return IssuedInvoice(
        id=row["id"],
        value=row.get("valor"),
        issue_date=parse_date(row.get("data_emissao")),
        tax_rate=to_decimal(row.get("taxa_imposto")),
        number=row.get("numero_nota", "") or "",
        launch_date=parse_date(row.get("data_lancamento")),
        income_item_id=row.get("receita_item_id"),
        client_name=row.get("cliente_nome", "") or "",
        proposal_code=row.get("proposta_codigo", "") or "",
    )


def received_invoice_from_row(row: dict) -> ReceivedInvoice:
    return ReceivedInvoice(
        id=row["id"],
        number=row.get("numero_nota", "") or "",
        issue_date=parse_date(row.get("data_emissao")),
        total_value=row.get("valor_total"),
        issuer_tax_id=row.get("cnpj_emitente", "") or "",
        issuer_name=row.get("nome_emitente", "") or "",
        launch_date=parse_date(row.get("data_lancamento")),
        line_items=row.get("itens") or [],
    )
