"""Testes do cliente REST com a sessão HTTP simulada."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from painel.api.supabase_client import SupabaseClient, fetch_conversion_draft
from painel.errors import DataAccessError, DuplicateConversionError, ProposalNotApprovedError
from painel.models.financial_models import DateRange


def make_response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.content = b"[]" if payload is None else b"x"
    resp.json.return_value = payload if payload is not None else []
    if status >= 400:
        error = requests.exceptions.HTTPError(response=resp)
        resp.raise_for_status.side_effect = error
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("painel.api.supabase_client.time.sleep"):
        yield


class TestSupabaseClient:

    def setup_method(self):
        self.session = MagicMock()
        self.client = SupabaseClient(url="https://x.supabase.co/", key="chave", session=self.session)

    def test_requires_credentials(self, monkeypatch):
        monkeypatch.setattr("painel.api.supabase_client.SUPABASE_URL", "")
        monkeypatch.setattr("painel.api.supabase_client.SUPABASE_KEY", "")
        with pytest.raises(DataAccessError):
            SupabaseClient()

    def test_headers_and_url(self):
        self.session.request.return_value = make_response(payload=[{"id": "b1", "nome": "Cora"}])
        banks = self.client.get_banks()

        assert banks[0].name == "Cora"
        method, url = self.session.request.call_args.args
        headers = self.session.request.call_args.kwargs["headers"]
        assert method == "GET"
        assert url == "https://x.supabase.co/rest/v1/bancos"
        assert headers["apikey"] == "chave"
        assert headers["Authorization"] == "Bearer chave"
        assert headers["Range"] == "0-499"

    def test_paginates_until_short_page(self):
        self.session.request.side_effect = [
            make_response(payload=[{"id": 1}, {"id": 2}]),
            make_response(payload=[{"id": 3}]),
        ]
        rows = self.client.fetch_all_pages("bancos", page_size=2)

        assert [r["id"] for r in rows] == [1, 2, 3]
        ranges = [c.kwargs["headers"]["Range"] for c in self.session.request.call_args_list]
        assert ranges == ["0-1", "2-3"]

    def test_retries_on_server_error(self):
        self.session.request.side_effect = [
            make_response(status=503),
            make_response(payload=[{"id": "b1", "nome": "Cora"}]),
        ]
        assert len(self.client.get_banks()) == 1
        assert self.session.request.call_count == 2

    def test_retries_on_connection_error_then_gives_up(self, caplog):
        self.session.request.side_effect = requests.exceptions.ConnectionError()
        with pytest.raises(DataAccessError):
            self.client.get_banks()
        assert self.session.request.call_count == 3
        assert "esgotou" in caplog.text

    def test_client_error_is_not_retried(self):
        self.session.request.return_value = make_response(status=404)
        with pytest.raises(DataAccessError) as exc:
            self.client.get_banks()
        assert exc.value.code == "falha_acesso_dados"
        assert self.session.request.call_count == 1

    def test_date_range_filter(self):
        self.session.request.return_value = make_response(payload=[])
        self.client.get_expenses(DateRange(date(2026, 10, 1), date(2026, 10, 31)))

        params = self.session.request.call_args.kwargs["params"]
        assert params["data_lancamento"] == ["gte.2026-10-01", "lte.2026-10-31"]

    def test_proposal_not_found(self):
        self.session.request.return_value = make_response(payload=[])
        assert self.client.get_proposal_by_code("PROP-0000-000") is None


PROPOSAL_ROW = {
    "id": "p1",
    "codigo": "PROP-2026-014",
    "cliente_id": "c1",
    "valor_total": 1000,
    "status": "aprovada",
    "condicoes_pagamento": [
        {"id": "cp2", "descricao": "Entrega", "percentual": 70, "valor": 700, "ordem": 2},
        {"id": "cp1", "descricao": "Assinatura", "percentual": 30, "valor": 300, "ordem": 1},
    ],
}


class TestConversionDraft:

    def setup_method(self):
        self.session = MagicMock()
        self.client = SupabaseClient(url="https://x.supabase.co", key="chave", session=self.session)

    def test_records_for_proposal(self):
        self.session.request.return_value = make_response(payload=[{
            "id": "r1",
            "cliente_id": "c1",
            "proposta_id": "p1",
            "itens": [{"id": "i1", "receita_id": "r1", "valor": "300", "status": "pago",
                       "data_vencimento": "2026-10-01", "data_pagamento": "2026-10-02"}],
        }])
        records = self.client.get_records_for_proposal("p1")

        params = self.session.request.call_args.kwargs["params"]
        assert params["proposta_id"] == "eq.p1"
        assert self.session.request.call_args.args[1].endswith("/receitas")
        assert records[0].proposal_id == "p1"
        assert records[0].status.value == "pago"

    def test_draft_for_unconverted_proposal(self):
        self.session.request.side_effect = [
            make_response(payload=[PROPOSAL_ROW]),
            make_response(payload=[]),
        ]
        draft = fetch_conversion_draft(self.client, "PROP-2026-014", date(2026, 10, 19))

        assert draft.proposal_id == "p1"
        assert [i.description for i in draft.items] == ["Assinatura", "Entrega"]
        assert all(i.due_date == date(2026, 10, 19) for i in draft.items)

    def test_already_converted(self):
        self.session.request.side_effect = [
            make_response(payload=[PROPOSAL_ROW]),
            make_response(payload=[{"id": "r1", "cliente_id": "c1", "proposta_id": "p1"}]),
        ]
        with pytest.raises(DuplicateConversionError):
            fetch_conversion_draft(self.client, "PROP-2026-014")

    def test_unknown_code(self):
        self.session.request.return_value = make_response(payload=[])
        with pytest.raises(ProposalNotApprovedError):
            fetch_conversion_draft(self.client, "PROP-0000-000")
