"""
Painel Financeiro do Estúdio
Receitas, despesas e confronto fiscal do mês selecionado.

Executar:
    streamlit run painel/app.py
"""

import logging
import sys
from pathlib import Path

# Garante que o diretório raiz do projeto está no sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from painel.api.supabase_client import SupabaseClient, fetch_dashboard_data
from painel.components import fiscal_card, footer, painel_header, section_header
from painel.config import LEGAL_ENTITY_BANK_ID, configure_logging
from painel.errors import PainelError
from painel.services.conformance_service import (
    compute_fiscal_summary,
    compute_legal_bank_total,
    split_expenses_by_fiscal,
)
from painel.services.statistics_service import (
    available_months,
    compute_month_stats,
    compute_rolling_flow,
    flow_to_frame,
    pending_transactions,
    recent_transactions,
)
from painel.styles import CATEGORY_COLORS, COLORS, CUSTOM_CSS, PLOTLY_TEMPLATE
from painel.utils.caching import cached, clear_all_caches
from painel.utils.formatting import format_brl, format_date_br, format_growth
from painel.utils.periods import PERIOD_PRESETS, preset_range

configure_logging()
logger = logging.getLogger(__name__)

PRESET_LABELS = {
    "atual": "Mês atual",
    "anterior": "Mês anterior",
    "3meses": "Últimos 3 meses",
    "6meses": "Últimos 6 meses",
    "12meses": "Últimos 12 meses",
    "custom": "Personalizado",
}


# ═══════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════

st.set_page_config(
    page_title="Painel Financeiro",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


# ═══════════════════════════════════════════════════════
# DATA LOADING (cached)
# ═══════════════════════════════════════════════════════

@cached()
def load_data() -> dict:
    """Busca receitas, despesas, notas e bancos (cache de 5 min)."""
    return fetch_dashboard_data(SupabaseClient())


# ═══════════════════════════════════════════════════════
# SIDEBAR
# ═══════════════════════════════════════════════════════

months = available_months()

with st.sidebar:
    st.title("Filtros")
    selected = st.selectbox(
        "Mês",
        options=[m.value for m in months],
        format_func=lambda v: next(m.label for m in months if m.value == v),
    )
    preset = st.selectbox(
        "Período do confronto fiscal",
        options=list(PERIOD_PRESETS),
        index=PERIOD_PRESETS.index("3meses"),
        format_func=PRESET_LABELS.get,
    )
    custom_start = custom_end = None
    if preset == "custom":
        custom_start = st.date_input("Início", value=None, format="DD/MM/YYYY")
        custom_end = st.date_input("Fim", value=None, format="DD/MM/YYYY")
    st.divider()
    if st.button("Atualizar Dados", use_container_width=True):
        clear_all_caches()
        st.rerun()
    st.caption("Cache: 5 minutos")


# ═══════════════════════════════════════════════════════
# LOAD & COMPUTE
# ═══════════════════════════════════════════════════════

try:
    with st.spinner("Carregando dados..."):
        data = load_data()
except PainelError as e:
    logger.exception("Falha ao carregar dados do painel")
    st.error(f"Erro ao conectar com a base: {e.message}")
    st.info("Verifique SUPABASE_URL e SUPABASE_KEY no .env ou em st.secrets.")
    st.stop()

income_items = data["income_items"]
expenses = data["expenses"]

stats = compute_month_stats(income_items, expenses, month=selected)
flow = compute_rolling_flow(income_items, expenses, month=selected)
recent = recent_transactions(income_items, expenses, month=selected)
pending = pending_transactions(income_items, expenses, month=selected)

fiscal_range = preset_range(preset, custom_start=custom_start, custom_end=custom_end)
fiscal = compute_fiscal_summary(
    income_items,
    expenses,
    data["issued_invoices"],
    data["received_invoices"],
    LEGAL_ENTITY_BANK_ID,
    fiscal_range,
)
split = split_expenses_by_fiscal(expenses, fiscal_range)
legal_bank = next((b for b in data["banks"] if b.id == LEGAL_ENTITY_BANK_ID), None)

st.markdown(painel_header(stats.month_label), unsafe_allow_html=True)


# ═══════════════════════════════════════════════════════
# KPIs DO MÊS
# ═══════════════════════════════════════════════════════

c1, c2, c3, c4 = st.columns(4)

with c1:
    st.metric(
        label="Saldo Atual",
        value=format_brl(stats.balance),
        help="Todas as receitas pagas - todas as despesas pagas",
    )

with c2:
    st.metric(
        label="Receitas",
        value=format_brl(stats.income),
        delta=format_growth(stats.income_growth),
        help=f"A receber no mês: {format_brl(stats.pending_income)}",
    )

with c3:
    st.metric(
        label="Despesas",
        value=format_brl(stats.expense),
        delta=format_growth(stats.expense_growth),
        delta_color="inverse",
        help=f"A pagar no mês: {format_brl(stats.pending_expense)}",
    )

with c4:
    st.metric(
        label="Lucro",
        value=format_brl(stats.profit),
        delta=format_growth(stats.profit_growth),
    )


# ═══════════════════════════════════════════════════════
# FLUXO MENSAL
# ═══════════════════════════════════════════════════════

st.markdown(section_header("Fluxo Mensal", f"Últimos {len(flow)} meses"), unsafe_allow_html=True)

df_flow = flow_to_frame(flow)

fig_flow = go.Figure()
fig_flow.add_trace(go.Bar(
    x=df_flow["period"],
    y=df_flow["income"],
    name="Receitas",
    marker_color=COLORS["income"],
))
fig_flow.add_trace(go.Bar(
    x=df_flow["period"],
    y=df_flow["expense"],
    name="Despesas",
    marker_color=COLORS["expense"],
))
fig_flow.add_trace(go.Scatter(
    x=df_flow["period"],
    y=df_flow["balance"],
    name="Saldo",
    mode="lines+markers",
    line=dict(color=COLORS["primary"], width=2),
))
fig_flow.update_layout(
    template=PLOTLY_TEMPLATE,
    barmode="group",
    height=360,
    yaxis=dict(tickformat=",.0f"),
    hovermode="x unified",
)
st.plotly_chart(fig_flow, use_container_width=True)


# ═══════════════════════════════════════════════════════
# CATEGORIAS
# ═══════════════════════════════════════════════════════

def make_category_donut(categories):
    fig = go.Figure(go.Pie(
        labels=[c.name for c in categories],
        values=[float(c.amount) for c in categories],
        hole=0.55,
        textinfo="percent",
        marker=dict(colors=CATEGORY_COLORS[:len(categories)]),
    ))
    fig.update_layout(
        template=PLOTLY_TEMPLATE,
        height=300,
        showlegend=True,
        annotations=[dict(
            text=f"<b>{format_brl(sum(c.amount for c in categories))}</b>",
            x=0.5, y=0.5,
            font=dict(size=13, color=COLORS["text_primary"]),
            showarrow=False,
        )],
    )
    return fig


col_inc, col_exp = st.columns(2)

with col_inc:
    st.markdown(section_header("Receitas por Categoria"), unsafe_allow_html=True)
    if stats.income_by_category:
        st.plotly_chart(make_category_donut(stats.income_by_category), use_container_width=True)
    else:
        st.info("Nenhuma receita paga no mês.")

with col_exp:
    st.markdown(section_header("Despesas por Categoria"), unsafe_allow_html=True)
    if stats.expense_by_category:
        st.plotly_chart(make_category_donut(stats.expense_by_category), use_container_width=True)
    else:
        st.info("Nenhuma despesa paga no mês.")


# ═══════════════════════════════════════════════════════
# TRANSAÇÕES
# ═══════════════════════════════════════════════════════

def transactions_frame(transactions, date_attr: str) -> pd.DataFrame:
    return pd.DataFrame([{
        "Data": format_date_br(getattr(t, date_attr)),
        "Tipo": t.kind.capitalize(),
        "Descrição": t.description,
        "Valor": format_brl(t.value),
        "Status": t.status,
    } for t in transactions])


col_recent, col_pending = st.columns(2)

with col_recent:
    st.markdown(section_header("Transações Recentes"), unsafe_allow_html=True)
    if recent:
        st.dataframe(transactions_frame(recent, "date"), use_container_width=True, hide_index=True)
    else:
        st.info("Nenhuma transação no mês.")

with col_pending:
    st.markdown(section_header("Pendentes", "Vencimento mais próximo primeiro"), unsafe_allow_html=True)
    if pending:
        st.dataframe(transactions_frame(pending, "due_date"), use_container_width=True, hide_index=True)
    else:
        st.success("Nada pendente no mês.")


# ═══════════════════════════════════════════════════════
# CONFRONTO FISCAL
# ═══════════════════════════════════════════════════════

st.markdown(
    section_header(
        "Confronto Fiscal",
        f"{format_date_br(fiscal_range.start)} a {format_date_br(fiscal_range.end)}",
    ),
    unsafe_allow_html=True,
)

fc1, fc2, fc3 = st.columns(3)

with fc1:
    st.markdown(
        fiscal_card("Receitas", fiscal.revenue, "Notas emitidas", "Receita PJ no banco jurídico"),
        unsafe_allow_html=True,
    )

with fc2:
    st.markdown(
        fiscal_card("Despesas", fiscal.expense, "Notas recebidas", "Despesas não fiscais"),
        unsafe_allow_html=True,
    )
    st.caption(
        f"Fiscais: {format_brl(split.fiscal_total)} ({split.fiscal_count}) · "
        f"Não fiscais: {format_brl(split.non_fiscal_total)} ({split.non_fiscal_count})"
    )

with fc3:
    st.metric(label="Lucro do Período", value=format_brl(fiscal.period_profit))
    if legal_bank is not None:
        bank_total = compute_legal_bank_total(income_items, legal_bank, fiscal_range)
        st.metric(
            label=f"Recebido em {bank_total.bank_name}",
            value=format_brl(bank_total.amount),
            help=f"{bank_total.count} parcelas pagas",
        )
    else:
        st.warning("Banco jurídico não encontrado no cadastro.")


# ═══════════════════════════════════════════════════════
# FOOTER
# ═══════════════════════════════════════════════════════

st.markdown(footer(), unsafe_allow_html=True)
