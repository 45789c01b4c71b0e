"""
Tema visual do painel do estúdio.
Tokens de cor, CSS customizado e template Plotly.
"""

from painel.models.financial_models import Severity

# ─── Color Tokens ───

COLORS = {
    # Fundos
    "bg_base": "#f7f7f5",
    "bg_surface": "#ffffff",
    "bg_elevated": "#f1f1ee",
    "border": "#e4e4df",
    "border_light": "#d4d4cd",
    # Texto
    "text_primary": "#1c1c1a",
    "text_secondary": "#55554f",
    "text_muted": "#8a8a82",
    # Destaque
    "primary": "#2f6f4f",
    "primary_light": "#4f9a72",
    "primary_dim": "rgba(47,111,79,0.10)",
    # Semânticas
    "income": "#16a34a",
    "expense": "#dc2626",
    "success": "#16a34a",
    "success_dim": "rgba(22,163,74,0.10)",
    "danger": "#dc2626",
    "danger_dim": "rgba(220,38,38,0.10)",
    "warning": "#d97706",
    "warning_dim": "rgba(217,119,6,0.10)",
}

CATEGORY_COLORS = [
    "#2f6f4f",
    "#d97706",
    "#2563eb",
    "#db2777",
    "#7c3aed",
    "#0891b2",
]

SEVERITY_VARIANT = {
    Severity.OK: "success",
    Severity.ALERTA: "warning",
    Severity.PERIGO: "danger",
}

SEVERITY_LABEL = {
    Severity.OK: "Em dia",
    Severity.ALERTA: "Atenção",
    Severity.PERIGO: "Crítico",
}


# ─── Plotly Template ───

_AXIS = {
    "gridcolor": COLORS["border"],
    "linecolor": COLORS["border"],
    "zerolinecolor": COLORS["border_light"],
    "tickfont": {"color": COLORS["text_muted"]},
}

PLOTLY_TEMPLATE = {
    "layout": {
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
        "font": {
            "family": "Inter, sans-serif",
            "color": COLORS["text_secondary"],
            "size": 12,
        },
        "xaxis": _AXIS,
        "yaxis": _AXIS,
        "legend": {
            "font": {"color": COLORS["text_secondary"]},
            "bgcolor": "rgba(0,0,0,0)",
            "orientation": "h",
            "y": 1.08,
        },
        "hoverlabel": {
            "bgcolor": COLORS["bg_surface"],
            "bordercolor": COLORS["border"],
            "font": {"color": COLORS["text_primary"]},
        },
        "colorway": CATEGORY_COLORS,
        "margin": {"l": 10, "r": 10, "t": 10, "b": 10},
    }
}


# ─── Custom CSS ───

CUSTOM_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

html, body, [data-testid="stAppViewContainer"] {
    font-family: 'Inter', sans-serif !important;
    background: """ + COLORS["bg_base"] + """;
}

.block-container {
    padding-top: 1.5rem !important;
    max-width: 1200px !important;
}

/* ── Cards de métrica ── */
[data-testid="stMetric"] {
    background: """ + COLORS["bg_surface"] + """;
    border: 1px solid """ + COLORS["border"] + """;
    border-radius: 10px;
    padding: 16px;
}
[data-testid="stMetricLabel"] {
    font-size: 0.75rem !important;
    font-weight: 600 !important;
    color: """ + COLORS["text_muted"] + """ !important;
    text-transform: uppercase !important;
}
[data-testid="stMetricValue"] {
    font-size: 1.35rem !important;
    font-weight: 700 !important;
    color: """ + COLORS["text_primary"] + """ !important;
}

[data-testid="stDataFrame"] {
    border: 1px solid """ + COLORS["border"] + """;
    border-radius: 10px;
}

/* ── Cabeçalhos ── */
.painel-header h1 {
    font-weight: 700 !important;
    font-size: 1.6rem !important;
    color: """ + COLORS["text_primary"] + """ !important;
    margin: 0 !important;
}
.painel-header .meta {
    font-size: 0.8rem;
    color: """ + COLORS["text_muted"] + """;
}
.section-hdr {
    margin: 1rem 0 0.75rem 0;
    padding-bottom: 0.4rem;
    border-bottom: 2px solid """ + COLORS["primary_dim"] + """;
}
.section-hdr h2 {
    font-weight: 700 !important;
    font-size: 1.15rem !important;
    color: """ + COLORS["text_primary"] + """ !important;
    margin: 0 !important;
}
.section-hdr .sub {
    font-size: 0.8rem;
    color: """ + COLORS["text_muted"] + """;
}

/* ── Confronto fiscal ── */
.fiscal-card {
    background: """ + COLORS["bg_surface"] + """;
    border: 1px solid """ + COLORS["border"] + """;
    border-left-width: 4px;
    border-radius: 10px;
    padding: 14px 16px;
    margin-bottom: 10px;
}
.fiscal-card.success { border-left-color: """ + COLORS["success"] + """; }
.fiscal-card.warning { border-left-color: """ + COLORS["warning"] + """; }
.fiscal-card.danger  { border-left-color: """ + COLORS["danger"] + """; }
.fiscal-card .title {
    font-size: 0.8rem;
    font-weight: 600;
    color: """ + COLORS["text_muted"] + """;
    text-transform: uppercase;
}
.fiscal-card .pct {
    font-size: 1.6rem;
    font-weight: 700;
    color: """ + COLORS["text_primary"] + """;
}
.fiscal-card .detail {
    font-size: 0.8rem;
    color: """ + COLORS["text_secondary"] + """;
}

/* ── Badges ── */
.st-badge {
    display: inline-block;
    font-size: 0.7rem;
    font-weight: 600;
    padding: 2px 8px;
    border-radius: 4px;
    text-transform: uppercase;
}
.st-badge.success { background: """ + COLORS["success_dim"] + """; color: """ + COLORS["success"] + """; }
.st-badge.danger  { background: """ + COLORS["danger_dim"] + """; color: """ + COLORS["danger"] + """; }
.st-badge.warning { background: """ + COLORS["warning_dim"] + """; color: """ + COLORS["warning"] + """; }

.painel-footer {
    text-align: center;
    padding: 1.5rem 0 0.5rem 0;
    font-size: 0.75rem;
    color: """ + COLORS["text_muted"] + """;
    border-top: 1px solid """ + COLORS["border"] + """;
    margin-top: 1rem;
}
</style>
"""
