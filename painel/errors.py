"""
Erros de regra de negócio do painel.

Cada erro carrega um `code` estável e uma `message` pronta para exibição,
para que a camada de interface mapeie falhas sem inspecionar texto.
"""


class PainelError(Exception):
    """Erro base do painel financeiro."""

    code = "erro"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidInputError(PainelError):
    """Entrada inválida para uma operação (ex: proposta sem condições)."""

    code = "entrada_invalida"


class ProposalNotApprovedError(InvalidInputError):
    """Proposta ainda não aprovada."""

    code = "proposta_nao_aprovada"


class DuplicateConversionError(InvalidInputError):
    """Proposta já possui uma receita vinculada."""

    code = "proposta_ja_convertida"


class DataAccessError(PainelError):
    """Falha ao buscar registros na base remota."""

    code = "falha_acesso_dados"
