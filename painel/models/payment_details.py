"""
Detalhes de pagamento por forma de pagamento.

União etiquetada: cada variante tem `method` fixo e todas carregam
`bank_id`/`bank_name`, pois um banco pode ser vinculado a qualquer forma.
`as_dict()` expõe os campos de interesse de cada variante mais o que sobrou
do payload original (`extra`), que é o que o matcher de bancos percorre.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class PaymentMethodFamily(str, Enum):
    PIX = "pix"
    CARTAO = "cartao"
    BOLETO = "boleto"
    OUTRO = "outro"


# ─── Variantes ───

@dataclass
class _DetailBase:
    bank_id: Optional[str] = None
    bank_name: str = ""
    # Chaves do payload sem campo próprio (ex: {"cartao": {...}} aninhado)
    extra: dict = field(default_factory=dict)

    def _fields(self) -> dict:
        raise NotImplementedError

    def as_dict(self) -> dict:
        data = self._fields()
        data["banco_id"] = self.bank_id
        data["banco_nome"] = self.bank_name
        for key, value in self.extra.items():
            # estrutura aninhada prevalece sobre campo vazio
            if not data.get(key):
                data[key] = value
        return data


@dataclass
class PixDetail(_DetailBase):
    """Pagamento via Pix."""
    key_type: str = ""  # cpf, cnpj, email, telefone, aleatoria
    key: str = ""
    bank: str = ""
    holder_name: str = ""
    method: PaymentMethodFamily = field(default=PaymentMethodFamily.PIX, init=False)

    def _fields(self) -> dict:
        return {
            "tipo_chave": self.key_type,
            "chave": self.key,
            "banco": self.bank,
            "nome_titular": self.holder_name,
        }


@dataclass
class CardDetail(_DetailBase):
    """Pagamento em cartão."""
    installments: int = 1
    interest_rate: float = 0.0
    bank: str = ""
    operator: str = ""
    machine: str = ""
    method: PaymentMethodFamily = field(default=PaymentMethodFamily.CARTAO, init=False)

    def _fields(self) -> dict:
        return {
            "parcelas": self.installments,
            "taxa_juros": self.interest_rate,
            "banco": self.bank,
            "operadora": self.operator,
            "maquina": self.machine,
        }


@dataclass
class BoletoDetail(_DetailBase):
    """Pagamento por boleto."""
    bank: str = ""
    barcode: str = ""
    digit_line: str = ""
    method: PaymentMethodFamily = field(default=PaymentMethodFamily.BOLETO, init=False)

    def _fields(self) -> dict:
        return {
            "banco": self.bank,
            "codigo_barras": self.barcode,
            "linha_digitavel": self.digit_line,
        }


@dataclass
class OtherDetail(_DetailBase):
    """Dinheiro, transferência ou formato desconhecido."""
    bank: str = ""
    notes: str = ""
    method: PaymentMethodFamily = field(default=PaymentMethodFamily.OUTRO, init=False)

    def _fields(self) -> dict:
        return {"banco": self.bank, "observacoes": self.notes}


PaymentDetail = Union[PixDetail, CardDetail, BoletoDetail, OtherDetail]


# ─── Parsing ───

_PIX_KEYS = {"tipo_chave", "chave"}
_CARD_KEYS = {"parcelas", "operadora", "maquina"}
_BOLETO_KEYS = {"codigo_barras", "linha_digitavel"}

_OWN_KEYS = {
    PaymentMethodFamily.PIX: {"tipo_chave", "chave", "banco", "nome_titular"},
    PaymentMethodFamily.CARTAO: {"parcelas", "taxa_juros", "banco", "operadora", "maquina"},
    PaymentMethodFamily.BOLETO: {"banco", "codigo_barras", "linha_digitavel"},
    PaymentMethodFamily.OUTRO: {"observacoes"},
}
_COMMON_KEYS = {"banco_id", "bankId", "banco_nome"}


def _to_int(value: Any, default: int = 1) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value: Any) -> float:
    try:
        return float(str(value).replace(",", "."))
    except (TypeError, ValueError):
        return 0.0


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _bank_id(data: dict) -> Optional[str]:
    for key in ("banco_id", "bankId"):
        value = data.get(key)
        if value is None or value == "" or isinstance(value, (dict, list)):
            continue
        return str(value)
    return None


def _infer_family(method: Optional[str], keys: set) -> PaymentMethodFamily:
    name = (method or "").strip().lower()
    if name:
        if name == "pix":
            return PaymentMethodFamily.PIX
        if name.startswith("cartao") or name.startswith("cartão"):
            return PaymentMethodFamily.CARTAO
        if name == "boleto":
            return PaymentMethodFamily.BOLETO
        return PaymentMethodFamily.OUTRO
    if keys & _PIX_KEYS:
        return PaymentMethodFamily.PIX
    if keys & _CARD_KEYS:
        return PaymentMethodFamily.CARTAO
    if keys & _BOLETO_KEYS:
        return PaymentMethodFamily.BOLETO
    return PaymentMethodFamily.OUTRO


def payment_detail_from_dict(
    data: Any,
    method: Optional[str] = None,
) -> Optional[PaymentDetail]:
    """
    Constrói a variante adequada a partir do JSON armazenado.

    Args:
        data: dict, string JSON ou None
        method: família explícita ("pix", "cartao_credito", ...); se ausente
            é inferida pelas chaves presentes

    Returns:
        A variante correspondente, ou None se não houver detalhes
    """
    if data is None or data == "":
        return None

    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            logger.debug("Detalhes de pagamento com JSON inválido ignorados")
            return None

    if not isinstance(data, dict) or not data:
        return None

    family = _infer_family(method, set(data))
    own = _OWN_KEYS[family] | _COMMON_KEYS | {"banco"}

    bank_id = _bank_id(data)
    common = {
        "bank_id": bank_id,
        "bank_name": _text(data, "banco_nome"),
        "extra": {
            k: v for k, v in data.items()
            if k not in own or isinstance(v, (dict, list))
            # bankId divergente de banco_id continua visível ao matcher
            or (k == "bankId" and v not in (None, "") and str(v) != bank_id)
        },
    }
    if family is PaymentMethodFamily.PIX:
        return PixDetail(
            key_type=_text(data, "tipo_chave"),
            key=_text(data, "chave"),
            bank=_text(data, "banco"),
            holder_name=_text(data, "nome_titular"),
            **common,
        )
    if family is PaymentMethodFamily.CARTAO:
        return CardDetail(
            installments=_to_int(data.get("parcelas")),
            interest_rate=_to_float(data.get("taxa_juros", 0)),
            bank=_text(data, "banco"),
            operator=_text(data, "operadora"),
            machine=_text(data, "maquina"),
            **common,
        )
    if family is PaymentMethodFamily.BOLETO:
        return BoletoDetail(
            bank=_text(data, "banco"),
            barcode=_text(data, "codigo_barras"),
            digit_line=_text(data, "linha_digitavel"),
            **common,
        )
    return OtherDetail(
        bank=_text(data, "banco"),
        notes=_text(data, "observacoes"),
        **common,
    )
