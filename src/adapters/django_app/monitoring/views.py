"""
Endpoints de monitoramento.

- GET /health/: estado da aplicação e dependências
- GET /metrics/: exposição Prometheus
"""

import logging
import resource
import sys
import time

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils import timezone
from django.views import View

from src.adapters.django_app.shared.database import check_database_connection
from .metrics import render_metrics, set_users_total

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


def check_memory() -> dict:
    """Pico de memória residente do processo, comparado a MEMORY_LIMIT_MB."""
    max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux informa em KB; macOS em bytes
    usado_mb = max_rss / (1024 * 1024) if sys.platform == "darwin" else max_rss / 1024
    limite_mb = getattr(settings, "MEMORY_LIMIT_MB", 512)
    
    return {
        "status": "ok" if usado_mb < limite_mb else "warning",
        "max_rss_mb": round(usado_mb, 2),
        "limit_mb": limite_mb,
    }


class HealthView(View):
    """Health check: 200 se o banco responde, 503 caso contrário."""
    
    def get(self, request: HttpRequest) -> JsonResponse:
        database = check_database_connection()
        memory = check_memory()
        healthy = database["healthy"]
        
        if not healthy:
            logger.warning(f"Health check degraded | database={database}")
        
        return JsonResponse(
            {
                "status": "ok" if healthy else "error",
                "timestamp": timezone.now().isoformat(),
                "uptime": round(time.monotonic() - STARTED_AT, 2),
                "version": getattr(settings, "API_VERSION", "1.0.0"),
                "environment": getattr(settings, "ENVIRONMENT", "development"),
                "checks": {
                    "database": database,
                    "memory": memory,
                },
            },
            status=200 if healthy else 503,
        )


class MetricsView(View):
    """Exposição Prometheus; atualiza users_total antes de renderizar."""
    
    def get(self, request: HttpRequest) -> HttpResponse:
        from src.config.container import get_container
        
        try:
            set_users_total(get_container().contar_usuarios_service().execute())
        except Exception:
            # Scrape continua útil mesmo sem acesso ao banco
            logger.exception("Falha ao atualizar users_total")
        
        payload, content_type = render_metrics()
        return HttpResponse(payload, content_type=content_type)
