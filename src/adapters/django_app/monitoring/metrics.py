"""
Métricas Prometheus da API de Usuários.

Coleta:
- Requisições HTTP (contador e duração por método, rota e status)
- Total de usuários (gauge atualizado a cada scrape)
- Cadastros, eventos de segurança, bloqueios por rate limit e erros

Registry próprio para não misturar com métricas default do processo
e para permitir inspeção isolada nos testes.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from src.core.users.events import UsuarioCriadoEvent

REGISTRY = CollectorRegistry(auto_describe=True)

HTTP_DURATION_BUCKETS = (0.1, 0.5, 1, 2, 5)

# =============================================================================
# HTTP
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    name="http_requests_total",
    documentation="Total number of HTTP requests",
    labelnames=["method", "route", "status_code"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    name="http_request_duration_seconds",
    documentation="Duration of HTTP requests in seconds",
    labelnames=["method", "route", "status_code"],
    buckets=HTTP_DURATION_BUCKETS,
    registry=REGISTRY,
)

# =============================================================================
# Negócio
# =============================================================================

USERS_TOTAL = Gauge(
    name="users_total",
    documentation="Total number of users",
    registry=REGISTRY,
)

USER_REGISTRATIONS_TOTAL = Counter(
    name="user_registrations_total",
    documentation="Total number of user registrations",
    registry=REGISTRY,
)

# =============================================================================
# Segurança e erros
# =============================================================================

SECURITY_EVENTS_TOTAL = Counter(
    name="security_events_total",
    documentation="Total number of security events",
    labelnames=["type"],
    registry=REGISTRY,
)

RATE_LIMIT_HITS_TOTAL = Counter(
    name="rate_limit_hits_total",
    documentation="Total number of rate limit hits",
    registry=REGISTRY,
)

ERRORS_TOTAL = Counter(
    name="errors_total",
    documentation="Total number of errors",
    labelnames=["type", "route"],
    registry=REGISTRY,
)


# =============================================================================
# Helpers
# =============================================================================

def observe_http_request(method: str, route: str, status_code: int, duration_seconds: float) -> None:
    labels = {"method": method, "route": route, "status_code": str(status_code)}
    HTTP_REQUESTS_TOTAL.labels(**labels).inc()
    HTTP_REQUEST_DURATION.labels(**labels).observe(duration_seconds)


def set_users_total(total: int) -> None:
    USERS_TOTAL.set(total)


def increment_user_registrations() -> None:
    USER_REGISTRATIONS_TOTAL.inc()


def increment_security_event(event_type: str) -> None:
    SECURITY_EVENTS_TOTAL.labels(type=event_type).inc()


def increment_rate_limit_hit() -> None:
    RATE_LIMIT_HITS_TOTAL.inc()


def increment_error(error_type: str, route: str) -> None:
    ERRORS_TOTAL.labels(type=error_type, route=route).inc()


def render_metrics() -> tuple:
    """Retorna (payload, content_type) no formato de exposição Prometheus."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


def registrar_handlers_metricas(publisher) -> None:
    """
    Conecta handlers locais de eventos às métricas de negócio.
    
    Idempotente: chamar duas vezes no mesmo publisher não duplica contagem.
    """
    if getattr(publisher, "_metricas_registradas", False):
        return
    publisher.register_handler(
        UsuarioCriadoEvent.__name__,
        lambda event: increment_user_registrations(),
    )
    publisher._metricas_registradas = True
