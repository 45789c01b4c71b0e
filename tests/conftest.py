"""Fixtures compartilhadas: fábricas de registros de domínio."""

from datetime import date
from decimal import Decimal

import pytest

from painel.models.financial_models import DateRange
from painel.models.payment_details import PixDetail
from painel.models.records import (
    Client,
    Expense,
    ExpenseCategory,
    ExpenseStatus,
    IncomeCategory,
    IncomeItem,
    ItemStatus,
    IssuedInvoice,
    ReceivedInvoice,
)

LEGAL_BANK = "6a147eb7-3c69-4203-9ef1-adb4258d4451"
OTHER_BANK = "b1e0c9d2-0000-4000-8000-000000000001"

CNPJ_CLIENT = Client(id="c-pj", name="Construtora Alfa", document="12.345.678/0001-90")
CPF_CLIENT = Client(id="c-pf", name="Maria Souza", document="123.456.789-09")


@pytest.fixture
def legal_bank_id():
    return LEGAL_BANK


@pytest.fixture
def october():
    return DateRange(date(2026, 10, 1), date(2026, 10, 31))


@pytest.fixture
def make_item():
    """Fábrica de parcelas de receita."""
    counter = {"n": 0}

    def _make(
        value="100",
        due_date=date(2026, 10, 10),
        status=ItemStatus.PENDENTE,
        client=CNPJ_CLIENT,
        bank_id=None,
        category=None,
        **kwargs,
    ):
        counter["n"] += 1
        detail = kwargs.pop("payment_detail", None)
        if detail is None and bank_id:
            detail = PixDetail(bank_id=bank_id, key_type="cnpj", key="12345678000190")
        if category is not None and not isinstance(category, IncomeCategory):
            category = IncomeCategory(id=f"cat-{category}", name=category)
        return IncomeItem(
            id=kwargs.pop("id", f"item-{counter['n']}"),
            record_id=kwargs.pop("record_id", "rec-1"),
            value=Decimal(value) if isinstance(value, str) else value,
            due_date=due_date,
            status=status,
            payment_date=kwargs.pop(
                "payment_date", due_date if status == ItemStatus.PAGO else None
            ),
            payment_method_id=kwargs.pop("payment_method_id", "fp-pix"),
            payment_detail=detail,
            client=client,
            category=category,
            category_id=category.id if category else kwargs.pop("category_id", None),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_expense():
    """Fábrica de despesas."""
    counter = {"n": 0}

    def _make(
        value="100",
        launch_date=date(2026, 10, 5),
        status=ExpenseStatus.PAGO,
        is_fiscal=False,
        category_name="Aluguel",
        **kwargs,
    ):
        counter["n"] += 1
        category = kwargs.pop("category", "unset")
        if category == "unset":
            category = ExpenseCategory(
                id=f"cat-{category_name}", name=category_name, is_fiscal=is_fiscal
            )
        return Expense(
            id=kwargs.pop("id", f"exp-{counter['n']}"),
            value=value,
            launch_date=launch_date,
            payment_status=status,
            category_id=category.id if category else None,
            category=category,
            **kwargs,
        )

    return _make


@pytest.fixture
def issued_invoice():
    def _make(value, issue_date=date(2026, 10, 15), **kwargs):
        return IssuedInvoice(id=kwargs.pop("id", "nf-1"), value=value, issue_date=issue_date, **kwargs)

    return _make


@pytest.fixture
def received_invoice():
    def _make(total_value, issue_date=date(2026, 10, 15), **kwargs):
        return ReceivedInvoice(
            id=kwargs.pop("id", "nfr-1"),
            number=kwargs.pop("number", "001"),
            issue_date=issue_date,
            total_value=total_value,
            **kwargs,
        )

    return _make
