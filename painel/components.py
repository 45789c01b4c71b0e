"""
Componentes HTML reutilizáveis para o painel.
Retornam strings HTML para uso com st.markdown(html, unsafe_allow_html=True).
"""

from painel.models.financial_models import ConformanceResult
from painel.styles import SEVERITY_LABEL, SEVERITY_VARIANT
from painel.utils.formatting import format_brl, format_percent


def painel_header(month_label: str) -> str:
    """Header principal com o mês selecionado."""
    return f"""
    <div class="painel-header">
        <h1>Painel Financeiro</h1>
        <div class="meta">{month_label}</div>
    </div>
    """


def section_header(title: str, subtitle: str = None) -> str:
    """Header de seção com borda de destaque."""
    sub_html = f'<div class="sub">{subtitle}</div>' if subtitle else ""
    return f"""
    <div class="section-hdr">
        <h2>{title}</h2>
        {sub_html}
    </div>
    """


def status_badge(text: str, variant: str = "success") -> str:
    """Badge inline (success, warning, danger)."""
    return f'<span class="st-badge {variant}">{text}</span>'


def fiscal_card(title: str, result: ConformanceResult, numerator_label: str, denominator_label: str) -> str:
    """Card de confronto fiscal: percentual, badge de severidade e os dois totais."""
    variant = SEVERITY_VARIANT[result.severity]
    badge = status_badge(SEVERITY_LABEL[result.severity], variant)
    if result.is_applicable:
        pct = format_percent(result.percentage)
    else:
        pct = "Sem movimento"
    return f"""
    <div class="fiscal-card {variant}">
        <div class="title">{title} {badge}</div>
        <div class="pct">{pct}</div>
        <div class="detail">{numerator_label}: {format_brl(result.numerator)}</div>
        <div class="detail">{denominator_label}: {format_brl(result.denominator)}</div>
    </div>
    """


def footer() -> str:
    return """
    <div class="painel-footer">
        Painel Financeiro &middot; Atualização automática a cada 5 min
    </div>
    """
