"""Testes do ciclo de vida das parcelas e da agregação das receitas."""

from datetime import date
from decimal import Decimal
from itertools import product

import pytest

from painel.errors import InvalidInputError
from painel.models.financial_models import DateRange
from painel.models.records import Client, IncomeRecord, ItemStatus, aggregate_status
from painel.services.income_service import (
    clear_payment,
    filter_income_items,
    record_payment,
    recompute_record_status,
    summarize_items_by_status,
    update_item,
    validate_record_for_persistence,
)

from conftest import LEGAL_BANK, OTHER_BANK


class TestLifecycle:

    def test_record_payment_sets_date_and_status(self, make_item):
        item = make_item()
        result = record_payment(item, date(2026, 10, 12))
        assert result is item
        assert item.status == ItemStatus.PAGO
        assert item.payment_date == date(2026, 10, 12)

    def test_record_payment_defaults_to_today(self, make_item):
        item = record_payment(make_item())
        assert item.payment_date == date.today()

    def test_round_trip_restores_pending(self, make_item):
        """Baixa seguida de estorno volta a pendente sem data"""
        item = make_item()
        clear_payment(record_payment(item, date(2026, 10, 12)))
        assert item.status == ItemStatus.PENDENTE
        assert item.payment_date is None

    def test_update_item_keeps_status(self, make_item):
        item = make_item(status=ItemStatus.PAGO)
        update_item(item, value="250,00", description="Entrada")
        assert item.value == Decimal("250.00")
        assert item.description == "Entrada"
        assert item.status == ItemStatus.PAGO

    def test_update_item_rejects_non_positive_value(self, make_item):
        with pytest.raises(InvalidInputError):
            update_item(make_item(), value=0)

    def test_update_item_rejects_status(self, make_item):
        """Status só muda pelo ciclo de vida"""
        with pytest.raises(InvalidInputError):
            update_item(make_item(), status=ItemStatus.PAGO)


class TestRecomputeRecordStatus:

    def test_empty_record_is_pending(self):
        summary = recompute_record_status([])
        assert summary.status == ItemStatus.PENDENTE
        assert summary.total == 0

    def test_total_uses_coerced_values(self, make_item):
        raw = make_item()
        raw.value = "700,50"
        items = [make_item(value="300"), raw]
        assert recompute_record_status(items).total == Decimal("1000.50")

    @pytest.mark.parametrize("statuses", list(product(
        [ItemStatus.PENDENTE, ItemStatus.PAGO], repeat=3
    )))
    def test_status_is_exhaustive(self, make_item, statuses):
        items = [make_item(status=s) for s in statuses]
        status = recompute_record_status(items).status
        if all(s == ItemStatus.PAGO for s in statuses):
            assert status == ItemStatus.PAGO
        elif all(s == ItemStatus.PENDENTE for s in statuses):
            assert status == ItemStatus.PENDENTE
        else:
            assert status == ItemStatus.PAGO_PARCIAL

    def test_record_status_property(self, make_item):
        record = IncomeRecord(
            id="rec-1", client_id="c-pj",
            items=[make_item(status=ItemStatus.PAGO), make_item()],
        )
        assert record.status == ItemStatus.PAGO_PARCIAL
        assert record.total_value == Decimal("200")

    def test_aggregate_status_lives_with_records(self, make_item):
        assert aggregate_status([]) == ItemStatus.PENDENTE
        assert aggregate_status([make_item(status=ItemStatus.PAGO)]) == ItemStatus.PAGO
        assert IncomeRecord(id="r", client_id="c").status == ItemStatus.PENDENTE


class TestSummaries:

    def test_summarize_by_status(self, make_item):
        items = [
            make_item(value="100", status=ItemStatus.PAGO),
            make_item(value="50", status=ItemStatus.PAGO),
            make_item(value="30"),
        ]
        totals = summarize_items_by_status(items)
        assert totals[ItemStatus.PAGO].value == Decimal("150")
        assert totals[ItemStatus.PAGO].count == 2
        assert totals[ItemStatus.PENDENTE].count == 1
        assert totals[ItemStatus.PAGO_PARCIAL].count == 0


class TestValidation:

    def test_requires_items(self):
        with pytest.raises(InvalidInputError) as exc:
            validate_record_for_persistence(IncomeRecord(id=None, client_id="c"))
        assert exc.value.code == "sem_parcelas"

    def test_requires_payment_method(self, make_item):
        record = IncomeRecord(
            id=None, client_id="c",
            items=[make_item(), make_item(payment_method_id=None)],
        )
        with pytest.raises(InvalidInputError) as exc:
            validate_record_for_persistence(record)
        assert exc.value.code == "forma_pagamento_obrigatoria"
        assert "parcela 2" in exc.value.message


class TestFilterIncomeItems:

    def setup_method(self):
        self.client = Client(id="c-9", name="Estúdio Beta", document="")

    def test_filters_and_sorts_by_due_desc(self, make_item):
        items = [
            make_item(due_date=date(2026, 9, 1), status=ItemStatus.PAGO),
            make_item(due_date=date(2026, 10, 20), status=ItemStatus.PAGO),
            make_item(due_date=date(2026, 10, 5), status=ItemStatus.PAGO),
            make_item(due_date=date(2026, 10, 6)),
        ]
        result = filter_income_items(
            items,
            status=ItemStatus.PAGO,
            due_range=DateRange(date(2026, 10, 1), date(2026, 10, 31)),
        )
        assert [i.due_date.day for i in result] == [20, 5]

    def test_value_range_and_bank(self, make_item):
        items = [
            make_item(value="100", bank_id=LEGAL_BANK),
            make_item(value="900", bank_id=LEGAL_BANK),
            make_item(value="500", bank_id=OTHER_BANK),
        ]
        result = filter_income_items(items, min_value="200", bank_id=LEGAL_BANK)
        assert [i.value for i in result] == [Decimal("900")]

    def test_term_matches_client_proposal_or_description(self, make_item):
        items = [
            make_item(client=self.client, record_id="r1"),
            make_item(record_id="r2", description="Projeto executivo"),
            make_item(record_id="r3"),
        ]
        codes = {"r3": "PROP-2026-014"}
        assert len(filter_income_items(items, term="beta")) == 1
        assert len(filter_income_items(items, term="EXECUTIVO")) == 1
        assert len(filter_income_items(items, term="prop-2026", proposal_codes=codes)) == 1

    def test_items_without_due_date_sort_last(self, make_item):
        """Parcela sem vencimento legível não quebra a ordenação"""
        undated = make_item(due_date=None)
        items = [undated, make_item(due_date=date(2026, 10, 1)), make_item(due_date=date(2026, 11, 3))]
        result = filter_income_items(items)
        assert [i.due_date for i in result] == [date(2026, 11, 3), date(2026, 10, 1), None]
