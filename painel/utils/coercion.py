"""
Coerção de valores monetários.

Registros vindos da base nem sempre guardam valores como número:
aparecem como float, string com vírgula decimal ("1234,56"), string com
ponto decimal ou nulo. Tudo vira Decimal; o que não dá para ler vira zero.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Any, Iterable

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Converte um valor monetário de formato desconhecido em Decimal. Nunca levanta."""
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            result = ZERO
    elif isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            logger.debug("Valor monetário ilegível tratado como zero: %r", value)
            return ZERO
    else:
        logger.debug("Tipo monetário inesperado %s tratado como zero", type(value).__name__)
        return ZERO

    if not result.is_finite():
        logger.debug("Valor monetário não finito tratado como zero: %r", value)
        return ZERO
    return result


def sum_values(values: Iterable[Any]) -> Decimal:
    """Soma valores aplicando coerção em cada um."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return total


def round_half_up(value: Decimal) -> int:
    """Arredonda para inteiro com meio em direção a +inf (como Math.round)."""
    shifted = to_decimal(value) + Decimal("0.5")
    return int(shifted.to_integral_value(rounding=ROUND_FLOOR))
