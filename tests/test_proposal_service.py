"""Testes da conversão de propostas em receitas."""

from datetime import date
from decimal import Decimal

import pytest

from painel.errors import (
    DuplicateConversionError,
    InvalidInputError,
    ProposalNotApprovedError,
)
from painel.models.records import (
    IncomeRecord,
    ItemStatus,
    PaymentCondition,
    Proposal,
    ProposalStatus,
)
from painel.services.proposal_service import (
    check_convertible,
    convert_proposal_to_income_draft,
    finalize_draft,
)

CONVERSION_DAY = date(2026, 10, 19)


def make_proposal(conditions=None, status=ProposalStatus.APROVADA):
    if conditions is None:
        conditions = [
            PaymentCondition(id="cp-2", description="Entrega", percentage=Decimal("70"),
                             value=Decimal("700"), order=2),
            PaymentCondition(id="cp-1", description="Assinatura", percentage=Decimal("30"),
                             value=Decimal("300"), order=1),
        ]
    return Proposal(
        id="prop-1",
        code="PROP-2026-007",
        client_id="c-pj",
        total_value=Decimal("1000"),
        status=status,
        payment_conditions=conditions,
        title="Reforma da sede",
    )


class TestConvertProposal:

    def setup_method(self):
        self.draft = convert_proposal_to_income_draft(make_proposal(), CONVERSION_DAY)

    def test_one_item_per_condition_in_order(self):
        """300/700 viram duas parcelas, total 1.000, pendente"""
        assert [i.value for i in self.draft.items] == [Decimal("300"), Decimal("700")]
        assert self.draft.total_value == Decimal("1000")
        assert self.draft.status == ItemStatus.PENDENTE

    def test_items_copy_condition_data(self):
        first = self.draft.items[0]
        assert first.description == "Assinatura"
        assert first.payment_condition_id == "cp-1"
        assert (first.installment, first.total_installments) == (1, 2)
        assert self.draft.items[1].installment == 2

    def test_dates_default_to_conversion_day(self):
        for item in self.draft.items:
            assert item.due_date == CONVERSION_DAY
            assert item.payment_date == CONVERSION_DAY
            assert item.payment_method_id is None

    def test_record_links(self):
        assert self.draft.proposal_id == "prop-1"
        assert self.draft.client_id == "c-pj"
        assert self.draft.description == "Reforma da sede"

    def test_empty_conditions(self):
        with pytest.raises(InvalidInputError) as exc:
            convert_proposal_to_income_draft(make_proposal(conditions=[]), CONVERSION_DAY)
        assert exc.value.code == "proposta_sem_condicoes"


class TestCheckConvertible:

    def test_requires_approval(self):
        with pytest.raises(ProposalNotApprovedError):
            check_convertible(make_proposal(status=ProposalStatus.ENVIADA))

    def test_rejects_duplicate(self):
        existing = [IncomeRecord(id="rec-1", client_id="c-pj", proposal_id="prop-1")]
        with pytest.raises(DuplicateConversionError) as exc:
            check_convertible(make_proposal(), existing)
        assert exc.value.code == "proposta_ja_convertida"

    def test_approved_without_record(self):
        check_convertible(make_proposal(), [IncomeRecord(id="r", client_id="c", proposal_id="outra")])


class TestFinalizeDraft:

    def setup_method(self):
        self.draft = convert_proposal_to_income_draft(make_proposal(), CONVERSION_DAY)

    def test_missing_payment_method(self):
        with pytest.raises(InvalidInputError) as exc:
            finalize_draft(self.draft)
        assert exc.value.code == "forma_pagamento_obrigatoria"

    def test_items_are_created_pending(self):
        for item in self.draft.items:
            item.payment_method_id = "fp-pix"
        record = finalize_draft(self.draft, record_id="rec-9")

        assert record.status == ItemStatus.PENDENTE
        assert record.total_value == Decimal("1000")
        assert all(i.payment_date is None for i in record.items)
        assert all(i.record_id == "rec-9" for i in record.items)
        assert [i.order for i in record.items] == [1, 2]
