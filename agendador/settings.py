"""Configurações compartilhadas carregadas a partir de variáveis de ambiente."""
from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_PATTERNS_PATH = "patterns"
_DEFAULT_SPACY_MODEL = "en_core_web_sm"
_DEFAULT_DURATION_MINUTES = 60
_DEFAULT_EVENT_BACKEND = "memory"
_DEFAULT_LOG_LEVEL = "INFO"
_DEFAULT_API_BIND_HOST = "0.0.0.0"
_DEFAULT_API_PORT = 8000


@lru_cache(maxsize=None)
def get_patterns_path() -> str:
    """Retorna o diretório que contém os arquivos de padrões da gramática."""

    return os.getenv("AGENDADOR_PATTERNS_PATH", _DEFAULT_PATTERNS_PATH)


@lru_cache(maxsize=None)
def get_spacy_model() -> str:
    """Retorna o nome do modelo spaCy usado para tokenização e POS."""

    return os.getenv("AGENDADOR_SPACY_MODEL", _DEFAULT_SPACY_MODEL)


@lru_cache(maxsize=None)
def get_default_duration_minutes() -> int:
    """Duração aplicada a eventos com horário de início mas sem término."""

    return int(
        os.getenv("AGENDADOR_DEFAULT_DURATION_MINUTES", _DEFAULT_DURATION_MINUTES)
    )


@lru_cache(maxsize=None)
def get_event_backend() -> str:
    """Backend de identidade dos eventos (``memory`` ou ``mongo``)."""

    return os.getenv("AGENDADOR_EVENT_BACKEND", _DEFAULT_EVENT_BACKEND)


@lru_cache(maxsize=None)
def get_log_level() -> str:
    return os.getenv("AGENDADOR_LOG_LEVEL", _DEFAULT_LOG_LEVEL)


@lru_cache(maxsize=None)
def get_api_port() -> int:
    """Retorna a porta configurada para expor a API."""

    return int(os.getenv("AGENDADOR_API_PORT", os.getenv("PORT", _DEFAULT_API_PORT)))


@lru_cache(maxsize=None)
def get_api_bind_host() -> str:
    """Retorna o host utilizado pelo Uvicorn para escutar conexões."""

    return os.getenv("AGENDADOR_API_BIND_HOST", _DEFAULT_API_BIND_HOST)


__all__ = [
    "get_api_bind_host",
    "get_api_port",
    "get_default_duration_minutes",
    "get_event_backend",
    "get_log_level",
    "get_patterns_path",
    "get_spacy_model",
]
