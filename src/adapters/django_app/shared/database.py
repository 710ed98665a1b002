"""
Database - Verificação de conectividade do banco configurado.

Usada pelo health check. Funciona com qualquer engine declarado
em settings.DATABASES (PostgreSQL em produção, SQLite em dev/test).
"""

from typing import Any, Dict
import logging
import time

from django.db import DatabaseError, connections

logger = logging.getLogger(__name__)


def check_database_connection(alias: str = "default") -> Dict[str, Any]:
    """
    Executa SELECT 1 na conexão e retorna informações do banco.
    
    Returns:
        Dict com status, vendor, nome do banco e latência (ms)
    """
    connection = connections[alias]
    inicio = time.perf_counter()
    
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "error",
            "vendor": connection.vendor,
            "error": str(e),
            "healthy": False,
        }
    
    return {
        "status": "connected",
        "vendor": connection.vendor,
        "database": str(connection.settings_dict.get("NAME", "")),
        "latency_ms": round((time.perf_counter() - inicio) * 1000, 2),
        "healthy": True,
    }
