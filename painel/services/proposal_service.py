"""
Serviço de conversão Proposta → Receita.

Uma proposta aprovada vira um rascunho de receita com uma parcela por
condição de pagamento. A forma de pagamento fica em aberto e precisa ser
escolhida antes de gravar.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from painel.errors import (
    DuplicateConversionError,
    InvalidInputError,
    ProposalNotApprovedError,
)
from painel.models.payment_details import PaymentDetail
from painel.models.records import IncomeItem, IncomeRecord, ItemStatus, Proposal
from painel.services.income_service import validate_record_for_persistence
from painel.utils.coercion import sum_values, to_decimal

logger = logging.getLogger(__name__)


@dataclass
class IncomeItemDraft:
    """Valores de formulário de uma parcela ainda não gravada."""
    value: Decimal
    due_date: date
    payment_date: Optional[date] = None
    description: str = ""
    payment_condition_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    payment_detail: Optional[PaymentDetail] = None
    installment: int = 1
    total_installments: int = 1
    interest_rate: Optional[Decimal] = None
    order: int = 0


@dataclass
class IncomeRecordDraft:
    """Rascunho de receita gerado a partir de uma proposta."""
    proposal_id: Optional[str]
    client_id: Optional[str]
    items: list[IncomeItemDraft] = field(default_factory=list)
    category_id: Optional[str] = None
    description: str = ""
    notes: str = ""

    @property
    def total_value(self) -> Decimal:
        return sum_values(item.value for item in self.items)

    @property
    def status(self) -> ItemStatus:
        return ItemStatus.PENDENTE


def check_convertible(proposal: Proposal, existing_records: Iterable[IncomeRecord] = ()):
    """
    Guarda do chamador: só propostas aprovadas e ainda sem receita.

    Raises:
        ProposalNotApprovedError: proposta não está aprovada
        DuplicateConversionError: já existe receita para a proposta
    """
    if not proposal.is_approved:
        raise ProposalNotApprovedError(
            f"Proposta {proposal.code} inexistente ou não aprovada"
        )
    if any(record.proposal_id == proposal.id for record in existing_records):
        raise DuplicateConversionError(
            f"A proposta {proposal.code} já possui uma receita vinculada"
        )


def convert_proposal_to_income_draft(
    proposal: Proposal,
    conversion_date: Optional[date] = None,
) -> IncomeRecordDraft:
    """
    Gera o rascunho de receita de uma proposta aprovada.

    Cada condição de pagamento vira uma parcela com valor e descrição
    copiados; vencimento e pagamento sugeridos na data da conversão.

    Raises:
        InvalidInputError: proposta sem condições de pagamento
    """
    if not proposal.payment_conditions:
        raise InvalidInputError(
            f"A proposta {proposal.code} não tem condições de pagamento",
            code="proposta_sem_condicoes",
        )

    today = conversion_date or date.today()
    conditions = sorted(proposal.payment_conditions, key=lambda c: c.order)
    total = len(conditions)

    items = [
        IncomeItemDraft(
            value=to_decimal(condition.value),
            due_date=today,
            payment_date=today,
            description=condition.description,
            payment_condition_id=condition.id,
            installment=index,
            total_installments=total,
            order=index,
        )
        for index, condition in enumerate(conditions, start=1)
    ]

    logger.info(
        "Proposta %s convertida em rascunho com %d parcelas", proposal.code, total
    )
    return IncomeRecordDraft(
        proposal_id=proposal.id,
        client_id=proposal.client_id,
        items=items,
        description=proposal.title or f"Proposta {proposal.code}",
    )


def finalize_draft(draft: IncomeRecordDraft, record_id: Optional[str] = None) -> IncomeRecord:
    """
    Transforma o rascunho na receita a ser gravada.

    Toda parcela nasce pendente; a data de pagamento sugerida não é gravada.

    Raises:
        InvalidInputError: parcela sem forma de pagamento, vencimento ou valor
    """
    record = IncomeRecord(
        id=record_id,
        client_id=draft.client_id,
        proposal_id=draft.proposal_id,
        category_id=draft.category_id,
        description=draft.description,
        notes=draft.notes,
        items=[
            IncomeItem(
                id=None,
                record_id=record_id,
                value=to_decimal(item.value),
                due_date=item.due_date,
                payment_method_id=item.payment_method_id,
                status=ItemStatus.PENDENTE,
                payment_condition_id=item.payment_condition_id,
                installment=item.installment or 1,
                total_installments=item.total_installments or 1,
                interest_rate=item.interest_rate,
                payment_detail=item.payment_detail,
                description=item.description or None,
                order=position,
            )
            for position, item in enumerate(draft.items, start=1)
        ],
    )
    validate_record_for_persistence(record)
    return record
