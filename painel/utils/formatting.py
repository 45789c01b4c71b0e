"""
Utilitários de formatação para valores financeiros brasileiros.
"""

from decimal import Decimal

from painel.models.records import only_digits


def format_brl(value: float | Decimal) -> str:
    """Formata um número como Real brasileiro (R$ 150.000,50)."""
    value = float(value)
    if value >= 0:
        return f"R$ {value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"-R$ {abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_percent(value: float, decimals: int = 0) -> str:
    """Formata um número como percentual (ex: 23%)."""
    return f"{float(value):.{decimals}f}%"


def format_growth(value: int) -> str:
    """Crescimento com sinal (ex: +12%, -3%)."""
    return f"{value:+d}%"


def format_document(document: str) -> str:
    """Formata CPF (11 dígitos) ou CNPJ (14 dígitos); outros ficam como vieram."""
    digits = only_digits(document)
    if len(digits) == 11:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
    if len(digits) == 14:
        return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"
    return document or ""


def format_date_br(day) -> str:
    """Data no formato dd/mm/aaaa."""
    return day.strftime("%d/%m/%Y") if day else ""
