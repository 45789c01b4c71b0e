"""
Utilitários de cache para o painel.
Evita buscar de novo os registros a cada interação do Streamlit.
"""

import streamlit as st

from painel.config import CACHE_TTL


def cached(ttl: int = CACHE_TTL):
    """Decorador wrapper em torno de st.cache_data."""
    return st.cache_data(ttl=ttl, show_spinner=False)


def clear_all_caches():
    """Limpa todos os caches do Streamlit."""
    st.cache_data.clear()
