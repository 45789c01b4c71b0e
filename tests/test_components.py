"""Testes dos componentes HTML."""

from decimal import Decimal

from painel.components import fiscal_card, section_header
from painel.models.financial_models import ConformanceResult, Severity


def test_fiscal_card_shows_severity():
    result = ConformanceResult(
        numerator=Decimal("9000"), denominator=Decimal("10000"),
        percentage=90, severity=Severity.ALERTA,
    )
    html = fiscal_card("Despesas", result, "Notas recebidas", "Despesas não fiscais")
    assert 'class="fiscal-card warning"' in html
    assert "90%" in html
    assert "R$ 9.000,00" in html
    assert "Atenção" in html


def test_fiscal_card_without_movement():
    html = fiscal_card("Receitas", ConformanceResult(), "Notas", "Receita")
    assert "Sem movimento" in html
    assert "success" in html


def test_section_header_subtitle():
    assert 'class="sub"' in section_header("Fluxo", "9 meses")
    assert 'class="sub"' not in section_header("Fluxo")
