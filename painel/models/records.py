"""
Registros de domínio do estúdio.
Propostas, receitas (com parcelas), despesas, notas fiscais e bancos,
já materializados pela camada de acesso a dados.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from painel.config import LEGAL_ENTITY_DOCUMENT_LENGTH
from painel.models.payment_details import PaymentDetail
from painel.utils.coercion import sum_values


# ─── Status ───

class ProposalStatus(str, Enum):
    RASCUNHO = "rascunho"
    ENVIADA = "enviada"
    APROVADA = "aprovada"
    REJEITADA = "rejeitada"
    VENCIDA = "vencida"


class ItemStatus(str, Enum):
    PENDENTE = "pendente"
    PAGO_PARCIAL = "pago_parcial"
    PAGO = "pago"


class ExpenseStatus(str, Enum):
    PENDENTE = "pendente"
    PAGO = "pago"
    CANCELADO = "cancelado"


def only_digits(text: Optional[str]) -> str:
    """Remove tudo que não for dígito."""
    return re.sub(r"\D", "", text or "")


# ─── Clientes e bancos ───

@dataclass
class Client:
    """Cliente (pessoa física ou jurídica)."""
    id: str
    name: str = ""
    document: str = ""  # CPF ou CNPJ, formatado ou não

    @property
    def is_legal_entity(self) -> bool:
        """True se o documento é um CNPJ (14 dígitos)."""
        return len(only_digits(self.document)) == LEGAL_ENTITY_DOCUMENT_LENGTH


@dataclass
class Bank:
    """Conta bancária cadastrada; usada como etiqueta nos detalhes de pagamento."""
    id: str
    name: str
    code: str = ""
    agency: str = ""
    account: str = ""
    pix_key_type: str = ""
    pix_key: str = ""
    beneficiary_name: str = ""
    beneficiary_type: str = ""  # cpf / cnpj

    @property
    def is_legal_entity(self) -> bool:
        return self.beneficiary_type == "cnpj"


# ─── Propostas ───

@dataclass
class PaymentCondition:
    """Condição de pagamento de uma proposta (ex: 30% na assinatura)."""
    description: str
    percentage: Decimal
    value: Decimal
    id: Optional[str] = None
    order: int = 0


@dataclass
class Proposal:
    """Proposta comercial."""
    id: str
    code: str
    client_id: str
    total_value: Decimal
    status: ProposalStatus = ProposalStatus.RASCUNHO
    payment_conditions: list[PaymentCondition] = field(default_factory=list)
    title: str = ""
    client: Optional[Client] = None

    @property
    def is_approved(self) -> bool:
        return self.status == ProposalStatus.APROVADA


# ─── Receitas ───

@dataclass
class IncomeCategory:
    id: str
    name: str = ""


@dataclass
class IncomeItem:
    """Parcela de uma receita. Pago se e somente se há data de pagamento."""
    id: Optional[str]
    record_id: Optional[str]
    value: Decimal
    due_date: Optional[date]
    payment_method_id: Optional[str] = None
    status: ItemStatus = ItemStatus.PENDENTE
    payment_date: Optional[date] = None
    payment_condition_id: Optional[str] = None
    installment: int = 1
    total_installments: int = 1
    interest_rate: Optional[Decimal] = None
    payment_detail: Optional[PaymentDetail] = None
    description: Optional[str] = None
    order: int = 0
    # Vínculos resolvidos pela camada de dados (somente leitura)
    client: Optional[Client] = None
    category: Optional[IncomeCategory] = None
    category_id: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.status == ItemStatus.PAGO


@dataclass
class IncomeRecord:
    """Receita: unidade faturável composta de uma ou mais parcelas."""
    id: Optional[str]
    client_id: Optional[str]
    proposal_id: Optional[str] = None
    category_id: Optional[str] = None
    description: str = ""
    notes: str = ""
    items: list[IncomeItem] = field(default_factory=list)
    client: Optional[Client] = None
    category: Optional[IncomeCategory] = None

    @property
    def total_value(self) -> Decimal:
        """Soma dos valores das parcelas; nunca armazenado."""
        return sum_values(item.value for item in self.items)

    @property
    def status(self) -> ItemStatus:
        return aggregate_status(self.items)


def aggregate_status(items: Iterable[IncomeItem]) -> ItemStatus:
    """pago se todas pagas, pendente se todas pendentes, pago_parcial caso contrário."""
    statuses = {item.status for item in items}
    if not statuses or statuses == {ItemStatus.PENDENTE}:
        return ItemStatus.PENDENTE
    if statuses == {ItemStatus.PAGO}:
        return ItemStatus.PAGO
    return ItemStatus.PAGO_PARCIAL


# ─── Despesas ───

@dataclass
class ExpenseCategory:
    id: str
    name: str = ""
    is_fiscal: Optional[bool] = None
    is_fixed: Optional[bool] = None


@dataclass
class Expense:
    """Despesa lançada."""
    id: str
    value: Any  # pode vir como string da base
    launch_date: date
    payment_status: ExpenseStatus = ExpenseStatus.PENDENTE
    category_id: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    description: str = ""
    bank_id: Optional[str] = None
    payment_date: Optional[date] = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == ExpenseStatus.PAGO


# ─── Notas fiscais ───

@dataclass
class IssuedInvoice:
    """Nota fiscal emitida pelo estúdio."""
    id: str
    value: Any
    issue_date: date
    tax_rate: Decimal = Decimal("0")
    number: str = ""
    launch_date: Optional[date] = None
    income_item_id: Optional[str] = None
    client_name: str = ""
    proposal_code: str = ""


@dataclass
class ReceivedInvoice:
    """Nota fiscal recebida de fornecedor."""
    id: str
    number: str
    issue_date: date
    total_value: Any  # bruto, às vezes string numérica
    issuer_tax_id: str = ""
    issuer_name: str = ""
    launch_date: Optional[date] = None
    line_items: list[dict] = field(default_factory=list)
