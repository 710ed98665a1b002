"""
Sanitização de entrada (corpo JSON e query string).

Remove bytes nulos, tags HTML, fragmentos comuns de SQL injection e
operadores de NoSQL injection de todas as strings (inclusive chaves
de dicionário). Campos de senha não são tocados: o hash deve refletir
exatamente o que o usuário digitou.
"""

from typing import Any, Iterable
import logging
import re

from django.utils.html import strip_tags

from src.adapters.django_app.monitoring.metrics import increment_security_event

logger = logging.getLogger(__name__)


CAMPOS_NAO_SANITIZADOS = frozenset({"senha", "password"})

_SCRIPT_PATTERN = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_SQL_PATTERN = re.compile(r"'|;|\\|/\*|\*/|--")
_NOSQL_PATTERN = re.compile(
    r"\$(?:where|ne|gte|gt|lte|lt|nin|in|regex|exists)",
    re.IGNORECASE,
)

# Abaixo desta fração do tamanho original a sanitização é considerada suspeita
LIMIAR_SUSPEITO = 0.8


def sanitizar_string(valor: str) -> str:
    sanitizado = valor.replace("\x00", "")
    sanitizado = _SCRIPT_PATTERN.sub("", sanitizado)
    sanitizado = strip_tags(sanitizado)
    sanitizado = _SQL_PATTERN.sub("", sanitizado)
    sanitizado = _NOSQL_PATTERN.sub("", sanitizado)
    sanitizado = sanitizado.strip()
    
    if sanitizado != valor and len(sanitizado) < len(valor) * LIMIAR_SUSPEITO:
        logger.warning(f"Significant sanitization applied: {valor!r} -> {sanitizado!r}")
        increment_security_event("suspicious_input")
    
    return sanitizado


def sanitizar_valor(valor: Any, preservar: Iterable[str] = CAMPOS_NAO_SANITIZADOS) -> Any:
    """
    Sanitiza recursivamente strings, listas e dicionários.
    
    Outros tipos (números, booleanos, None) passam inalterados.
    """
    preservar = frozenset(preservar)
    
    if isinstance(valor, str):
        return sanitizar_string(valor)
    
    if isinstance(valor, list):
        return [sanitizar_valor(item, preservar) for item in valor]
    
    if isinstance(valor, dict):
        resultado = {}
        for chave, item in valor.items():
            if chave in preservar:
                resultado[chave] = item
                continue
            chave_limpa = sanitizar_string(chave) if isinstance(chave, str) else chave
            resultado[chave_limpa] = sanitizar_valor(item, preservar)
        return resultado
    
    return valor
