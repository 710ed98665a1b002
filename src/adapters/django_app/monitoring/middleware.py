"""
Middleware de logging de requisições e métricas HTTP.

Para cada requisição:
- Atribui X-Request-ID (reaproveita o recebido ou gera um UUID)
- Loga entrada e conclusão (status, duração)
- Alerta requisições lentas
- Alimenta http_requests_total e http_request_duration_seconds
"""

from typing import Any
import logging
import time
import uuid

from django.conf import settings

from .metrics import increment_error, observe_http_request

logger = logging.getLogger(__name__)


SENSITIVE_KEYS = ("password", "senha", "token", "secret", "key", "authorization")
REDACTED = "[REDACTED]"


def redact(data: Any) -> Any:
    """Substitui valores de chaves sensíveis por [REDACTED], recursivamente."""
    if isinstance(data, dict):
        return {
            chave: REDACTED if any(s in str(chave).lower() for s in SENSITIVE_KEYS) else redact(valor)
            for chave, valor in data.items()
        }
    if isinstance(data, list):
        return [redact(item) for item in data]
    return data


def resolve_route(request) -> str:
    """Padrão da rota (ex: api/usuarios/<str:pk>/) para baixa cardinalidade."""
    match = getattr(request, "resolver_match", None)
    if match is not None and match.route:
        return "/" + match.route
    return "unmatched"


class RequestLoggingMiddleware:
    """
    Deve ficar no topo da pilha para medir a requisição inteira
    e marcar o X-Request-ID antes dos demais middlewares.
    """
    
    def __init__(self, get_response):
        self.get_response = get_response
        self.slow_threshold_ms = getattr(settings, "SLOW_REQUEST_THRESHOLD_MS", 1000)
    
    def __call__(self, request):
        request_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        request.request_id = request_id
        inicio = time.perf_counter()
        
        logger.info(
            f"Incoming request | id={request_id} | {request.method} {request.path} | "
            f"ip={request.META.get('REMOTE_ADDR')} | "
            f"user_agent={request.META.get('HTTP_USER_AGENT', '')} | "
            f"query={redact(request.GET.dict())}"
        )
        
        try:
            response = self.get_response(request)
        except Exception as e:
            duracao_ms = (time.perf_counter() - inicio) * 1000
            logger.error(
                f"Request failed | id={request_id} | {request.method} {request.path} | "
                f"duration={duracao_ms:.2f}ms | error={e}"
            )
            increment_error(e.__class__.__name__, resolve_route(request))
            raise
        
        duracao_ms = (time.perf_counter() - inicio) * 1000
        route = resolve_route(request)
        
        observe_http_request(request.method, route, response.status_code, duracao_ms / 1000)
        response["X-Request-ID"] = request_id
        
        logger.info(
            f"Request completed | id={request_id} | {request.method} {request.path} | "
            f"status={response.status_code} | duration={duracao_ms:.2f}ms"
        )
        
        if duracao_ms > self.slow_threshold_ms:
            logger.warning(
                f"Slow request detected | id={request_id} | {request.method} {request.path} | "
                f"duration={duracao_ms:.2f}ms"
            )
        
        return response
