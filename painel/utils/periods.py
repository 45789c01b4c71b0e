"""
Utilitários de período: meses, rótulos em português e filtros prontos.
"""

from calendar import monthrange
from datetime import date
from typing import Optional

from painel.config import FISCAL_LOOKBACK_MONTHS
from painel.models.financial_models import DateRange

MONTH_NAMES_PT = {
    1: "janeiro", 2: "fevereiro", 3: "março", 4: "abril",
    5: "maio", 6: "junho", 7: "julho", 8: "agosto",
    9: "setembro", 10: "outubro", 11: "novembro", 12: "dezembro",
}

PERIOD_PRESETS = ("atual", "anterior", "3meses", "6meses", "12meses", "custom")


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=monthrange(day.year, day.month)[1])


def month_range(day: date) -> DateRange:
    """Primeiro e último dia do mês de `day`."""
    return DateRange(month_start(day), month_end(day))


def shift_months(day: date, months: int) -> date:
    """Primeiro dia do mês deslocado `months` meses (negativo = passado)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def short_label(day: date) -> str:
    """Rótulo curto do eixo dos gráficos (ex: out/26)."""
    return f"{MONTH_NAMES_PT[day.month][:3]}/{day.strftime('%y')}"


def long_label(day: date) -> str:
    """Rótulo longo (ex: outubro/2026)."""
    return f"{MONTH_NAMES_PT[day.month]}/{day.year}"


def parse_month(selected: Optional[str], today: Optional[date] = None) -> date:
    """
    Converte o seletor "MM/YYYY" no primeiro dia do mês.

    Sem seleção (ou seleção ilegível) usa o mês corrente.
    """
    reference = today or date.today()
    if not selected:
        return month_start(reference)
    try:
        month, year = selected.split("/")
        return date(int(year), int(month), 1)
    except (ValueError, TypeError):
        return month_start(reference)


def preset_range(
    preset: str,
    today: Optional[date] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> DateRange:
    """
    Intervalo dos filtros de período dos confrontos fiscais.

    atual, anterior, 3meses, 6meses, 12meses ou custom; desconhecido cai
    na janela padrão (FISCAL_LOOKBACK_MONTHS).
    """
    today = today or date.today()

    if preset == "atual":
        return month_range(today)
    if preset == "anterior":
        return month_range(shift_months(today, -1))
    if preset == "custom" and custom_start and custom_end:
        return DateRange(custom_start, custom_end)

    span = {"3meses": 3, "6meses": 6, "12meses": 12}.get(preset, FISCAL_LOOKBACK_MONTHS)
    return DateRange(shift_months(today, -(span - 1)), month_end(today))
