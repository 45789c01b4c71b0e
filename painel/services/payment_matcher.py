"""
Busca de banco nos detalhes de pagamento.

Os detalhes variam por forma de pagamento e registros antigos aninham
sub-objetos (ex: {"cartao": {"banco_id": ...}}). A busca percorre a
estrutura até `max_depth` níveis procurando o id do banco em qualquer chave.
"""

import json
from typing import Any

from painel.config import MATCHER_MAX_DEPTH
from painel.models.payment_details import (
    BoletoDetail,
    CardDetail,
    OtherDetail,
    PixDetail,
)

_DIRECT_KEYS = ("banco_id", "bankId", "id")
_DETAIL_TYPES = (PixDetail, CardDetail, BoletoDetail, OtherDetail)


def _as_structure(detail: Any) -> Any:
    if isinstance(detail, _DETAIL_TYPES):
        return detail.as_dict()
    if isinstance(detail, str):
        try:
            return json.loads(detail)
        except ValueError:
            return None
    return detail


def _search(node: Any, bank_id: str, depth: int, max_depth: int) -> bool:
    if depth >= max_depth:
        return False

    if isinstance(node, dict):
        if any(node.get(key) == bank_id for key in _DIRECT_KEYS):
            return True
        children = node.values()
    elif isinstance(node, (list, tuple)):
        children = node
    else:
        return False

    for value in children:
        if value == bank_id:
            return True
        if isinstance(value, (dict, list, tuple)):
            if _search(value, bank_id, depth + 1, max_depth):
                return True
    return False


def references_bank(detail: Any, bank_id: str, max_depth: int = MATCHER_MAX_DEPTH) -> bool:
    """
    Verifica se o banco aparece em qualquer nível dos detalhes de pagamento.

    Args:
        detail: variante de PaymentDetail, dict, lista ou string JSON
        bank_id: id do banco procurado
        max_depth: níveis de estrutura examinados (o nível raiz conta como 1)

    Returns:
        True se o id foi encontrado; False para entradas vazias ou não estruturadas
    """
    if not bank_id:
        return False
    structure = _as_structure(detail)
    if not structure:
        return False
    return _search(structure, bank_id, 0, max_depth)
