"""
Cliente HTTP para a API REST do Supabase (PostgREST).

Responsabilidades:
- Autenticação por chave (apikey + Bearer)
- Rate limiting (100ms entre requests)
- Retry com backoff exponencial
- Paginação automática por cabeçalho Range
- Consultas financeiras tipadas
"""

import logging
import time
from datetime import date
from typing import Optional

import requests

from painel.api.row_mappers import (
    bank_from_row,
    expense_from_row,
    income_item_from_row,
    income_record_from_row,
    issued_invoice_from_row,
    proposal_from_row,
    received_invoice_from_row,
)
from painel.config import (
    MAX_RETRIES,
    MIN_REQUEST_INTERVAL,
    PAGE_SIZE,
    REST_PATH,
    RETRY_BACKOFF,
    SUPABASE_KEY,
    SUPABASE_URL,
)
from painel.errors import DataAccessError, ProposalNotApprovedError
from painel.models.financial_models import DateRange
from painel.models.records import (
    Bank,
    Expense,
    IncomeItem,
    IncomeRecord,
    IssuedInvoice,
    Proposal,
    ReceivedInvoice,
)
from painel.services.proposal_service import (
    IncomeRecordDraft,
    check_convertible,
    convert_proposal_to_income_draft,
)

logger = logging.getLogger(__name__)

RETRY_STATUS = (429, 500, 502, 503, 504)

INCOME_ITEM_SELECT = (
    "*,forma_pagamento:forma_pagamento_id(id,nome),"
    "receita:receita_id(id,categoria_id,"
    "cliente:cliente_id(id,nome,documento),categoria:categoria_id(id,nome))"
)
INCOME_RECORD_SELECT = (
    "*,cliente:cliente_id(id,nome,documento),categoria:categoria_id(id,nome),"
    "itens:receitas_itens(*,forma_pagamento:forma_pagamento_id(id,nome))"
)
EXPENSE_SELECT = "*,categoria:categoria_id(id,nome,despesa_fiscal,despesa_fixa)"
PROPOSAL_SELECT = (
    "*,cliente:cliente_id(id,nome,documento),"
    "condicoes_pagamento:proposta_condicoes_pagamento(*)"
)


def _range_filter(column: str, date_range: Optional[DateRange]) -> dict:
    """Filtro PostgREST de intervalo fechado; requests repete a chave para cada valor."""
    if date_range is None:
        return {}
    return {
        column: [
            f"gte.{date_range.start.isoformat()}",
            f"lte.{date_range.end.isoformat()}",
        ],
    }


class SupabaseClient:
    """Cliente de baixo nível para a API REST."""

    def __init__(self, url: str = None, key: str = None, session: requests.Session = None):
        self.url = (url or SUPABASE_URL).rstrip("/")
        self.key = key or SUPABASE_KEY
        if not self.url or not self.key:
            raise DataAccessError("SUPABASE_URL e SUPABASE_KEY precisam estar configurados")
        self.session = session or requests.Session()
        self._last_request_time = 0.0

    # ─── HTTP primitivos ───

    def _get_headers(self, extra: dict = None) -> dict:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(extra or {})
        return headers

    def _throttle(self):
        elapsed = time.time() - self._last_request_time
        if elapsed < MIN_REQUEST_INTERVAL:
            time.sleep(MIN_REQUEST_INTERVAL - elapsed)
        self._last_request_time = time.time()

    def _request(self, method: str, table: str, headers: dict = None, **kwargs) -> list | dict | None:
        last_error = None
        url = f"{self.url}{REST_PATH}/{table}"
        for attempt in range(MAX_RETRIES):
            self._throttle()
            try:
                resp = self.session.request(
                    method, url, headers=self._get_headers(headers), **kwargs
                )
                resp.raise_for_status()
                if resp.status_code == 204 or not resp.content:
                    return None
                return resp.json()
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else 0
                # 429 / 5xx → retry com backoff
                if status in RETRY_STATUS:
                    logger.warning(
                        "%s %s retornou %s (tentativa %d/%d)",
                        method, table, status, attempt + 1, MAX_RETRIES,
                    )
                    last_error = e
                    time.sleep(RETRY_BACKOFF * (2 ** attempt))
                    continue
                raise DataAccessError(f"{method} {table} falhou com status {status}") from e
            except requests.exceptions.ConnectionError as e:
                logger.warning(
                    "Falha de conexão em %s %s (tentativa %d/%d)",
                    method, table, attempt + 1, MAX_RETRIES,
                )
                last_error = e
                time.sleep(RETRY_BACKOFF * (2 ** attempt))
                continue

        logger.error("%s %s esgotou %d tentativas", method, table, MAX_RETRIES)
        raise DataAccessError(f"{method} {table} indisponível") from last_error

    def get(self, table: str, params: dict = None, headers: dict = None):
        return self._request("GET", table, params=params, headers=headers)

    # ─── Paginação ───

    def fetch_all_pages(
        self,
        table: str,
        params: dict = None,
        page_size: int = PAGE_SIZE,
    ) -> list:
        """Busca todas as linhas de uma tabela, página a página via Range."""
        all_rows = []
        offset = 0

        while True:
            headers = {
                "Range-Unit": "items",
                "Range": f"{offset}-{offset + page_size - 1}",
            }
            rows = self.get(table, params=params, headers=headers)

            if not rows or not isinstance(rows, list):
                break

            all_rows.extend(rows)

            if len(rows) < page_size:
                break
            offset += page_size

        logger.debug("%s: %d linhas", table, len(all_rows))
        return all_rows

    # ─── Consultas financeiras (alto nível) ───

    def get_income_items(self, due_range: DateRange = None, status: str = None) -> list[IncomeItem]:
        """Parcelas de receita com cliente e categoria da receita embutidos."""
        params = {"select": INCOME_ITEM_SELECT, "order": "data_vencimento.desc"}
        params.update(_range_filter("data_vencimento", due_range))
        if status:
            params["status"] = f"eq.{status}"
        return [income_item_from_row(r) for r in self.fetch_all_pages("receitas_itens", params)]

    def get_expenses(self, launch_range: DateRange = None) -> list[Expense]:
        """Despesas com a categoria (e a marcação fiscal) embutida."""
        params = {"select": EXPENSE_SELECT, "order": "data_lancamento.desc"}
        params.update(_range_filter("data_lancamento", launch_range))
        return [expense_from_row(r) for r in self.fetch_all_pages("despesas", params)]

    def get_issued_invoices(self, issue_range: DateRange = None) -> list[IssuedInvoice]:
        params = {"select": "*", "order": "data_emissao.desc"}
        params.update(_range_filter("data_emissao", issue_range))
        return [issued_invoice_from_row(r) for r in self.fetch_all_pages("notas_fiscais", params)]

    def get_received_invoices(self, issue_range: DateRange = None) -> list[ReceivedInvoice]:
        params = {"select": "*", "order": "data_emissao.desc"}
        params.update(_range_filter("data_emissao", issue_range))
        rows = self.fetch_all_pages("notas_fiscais_recebidas", params)
        return [received_invoice_from_row(r) for r in rows]

    def get_banks(self) -> list[Bank]:
        rows = self.fetch_all_pages("bancos", {"select": "*", "order": "nome.asc"})
        return [bank_from_row(r) for r in rows]

    def get_proposal_by_code(self, code: str) -> Optional[Proposal]:
        """Proposta pelo código (ex: PROP-2024-001), com condições de pagamento."""
        rows = self.get(
            "propostas",
            params={"select": PROPOSAL_SELECT, "codigo": f"eq.{code}"},
        )
        if not rows:
            logger.info("Proposta %s não encontrada", code)
            return None
        return proposal_from_row(rows[0])

    def get_records_for_proposal(self, proposal_id: str) -> list[IncomeRecord]:
        """Receitas já geradas a partir de uma proposta."""
        params = {"select": INCOME_RECORD_SELECT, "proposta_id": f"eq.{proposal_id}"}
        return [income_record_from_row(r) for r in self.fetch_all_pages("receitas", params)]


def fetch_dashboard_data(client: SupabaseClient) -> dict:
    """Carrega tudo que o painel usa em uma rodada de consultas."""
    return {
        "income_items": client.get_income_items(),
        "expenses": client.get_expenses(),
        "issued_invoices": client.get_issued_invoices(),
        "received_invoices": client.get_received_invoices(),
        "banks": client.get_banks(),
    }


def fetch_conversion_draft(
    client: SupabaseClient,
    code: str,
    conversion_date: Optional[date] = None,
) -> IncomeRecordDraft:
    """
    Busca a proposta pelo código e gera o rascunho de receita.

    Raises:
        ProposalNotApprovedError: proposta inexistente ou não aprovada
        DuplicateConversionError: proposta já convertida em receita
    """
    proposal = client.get_proposal_by_code(code)
    if proposal is None:
        raise ProposalNotApprovedError(f"Proposta {code} inexistente ou não aprovada")
    check_convertible(proposal, client.get_records_for_proposal(proposal.id))
    return convert_proposal_to_income_draft(proposal, conversion_date)
