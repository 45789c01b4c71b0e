"""
Configuração centralizada do painel financeiro.
Carrega variáveis de ambiente (.env local) ou st.secrets (Streamlit Cloud).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Carrega .env a partir da raiz do projeto (apenas local)
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def _get_secret(key: str, default: str = None) -> str | None:
    """Busca config em st.secrets (Cloud) ou os.environ (.env local)."""
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return st.secrets[key]
    except Exception:
        # st.secrets levanta quando não há secrets.toml
        pass
    return os.getenv(key, default)


def _get_bool(key: str, default: bool) -> bool:
    raw = _get_secret(key)
    if raw is None:
        return default
    return str(raw).strip().lower() in ("1", "true", "yes", "sim")


# ─── Banco de dados (Supabase / PostgREST) ───

SUPABASE_URL = _get_secret("SUPABASE_URL", "")
SUPABASE_KEY = _get_secret("SUPABASE_KEY", "")
REST_PATH = "/rest/v1"
MIN_REQUEST_INTERVAL = 0.1  # 100ms entre requests
MAX_RETRIES = 3
RETRY_BACKOFF = 1.0  # segundos
PAGE_SIZE = 500

# ─── Cache ───

CACHE_TTL = 300  # 5 minutos

# ─── Conformidade fiscal ───

# Banco Cora SCFI, conta que recebe os pagamentos de clientes PJ
LEGAL_ENTITY_BANK_ID = _get_secret(
    "BANCO_JURIDICO_ID", "6a147eb7-3c69-4203-9ef1-adb4258d4451"
)
CONFORMANCE_OK = 100
CONFORMANCE_ALERT = 90
MATCHER_MAX_DEPTH = 3
LEGAL_ENTITY_DOCUMENT_LENGTH = 14  # CNPJ
# Categoria com despesa_fiscal nulo conta como não fiscal
UNSET_FISCAL_IS_FISCAL = _get_bool("UNSET_FISCAL_IS_FISCAL", False)

# ─── Dashboard ───

FLOW_MONTHS = 9
CATEGORY_TOP_N = 6
RECENT_LIMIT = 5
PENDING_LIMIT = 3
AVAILABLE_MONTHS = 24
FISCAL_LOOKBACK_MONTHS = 3

# ─── Logging ───

LOG_LEVEL = _get_secret("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = None):
    """Configura o logging raiz do painel."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
