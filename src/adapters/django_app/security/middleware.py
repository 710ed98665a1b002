"""
Middlewares de segurança HTTP.

- RateLimitMiddleware: 429 acima do limite por IP, cabeçalhos X-RateLimit-*
- SecurityHeadersMiddleware: CSP, X-API-Version e remoção de cabeçalhos
  que expõem o servidor

HSTS, nosniff, Referrer-Policy e X-Frame-Options ficam com o
SecurityMiddleware/XFrameOptionsMiddleware do Django (ver settings).
"""

import logging

from django.conf import settings
from django.http import JsonResponse

from src.adapters.django_app.monitoring.metrics import (
    increment_rate_limit_hit,
    increment_security_event,
)
from .rate_limit import SlidingWindowRateLimiter, get_client_ip

logger = logging.getLogger(__name__)


DEFAULT_RATE_LIMIT = {
    "WINDOW_SECONDS": 60,
    "MAX_REQUESTS": 100,
    "EXEMPT_PATHS": ("/health/", "/metrics/"),
}

DEFAULT_CSP = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "script-src 'self'; "
    "img-src 'self' data: https:; "
    "object-src 'none'; "
    "frame-ancestors 'none'"
)


class RateLimitMiddleware:
    """
    Limita requisições por IP com janela deslizante.
    
    Configuração via settings.RATE_LIMIT (chaves de DEFAULT_RATE_LIMIT).
    """
    
    def __init__(self, get_response):
        self.get_response = get_response
        config = {**DEFAULT_RATE_LIMIT, **getattr(settings, "RATE_LIMIT", {})}
        self.exempt_paths = tuple(config["EXEMPT_PATHS"])
        self.limiter = SlidingWindowRateLimiter(
            window_seconds=config["WINDOW_SECONDS"],
            max_requests=config["MAX_REQUESTS"],
        )
    
    def __call__(self, request):
        if request.path.startswith(self.exempt_paths):
            return self.get_response(request)
        
        client_ip = get_client_ip(request)
        decision = self.limiter.hit(client_ip)
        
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for client: {client_ip} | path={request.path}")
            increment_rate_limit_hit()
            increment_security_event("rate_limit_exceeded")
            
            response = JsonResponse(
                {
                    "success": False,
                    "error": {
                        "message": "Too many requests, please try again later",
                        "code": "RATE_LIMIT_EXCEEDED",
                    },
                },
                status=429,
            )
            response["Retry-After"] = str(decision.retry_after)
        else:
            response = self.get_response(request)
        
        response["X-RateLimit-Limit"] = str(decision.limit)
        response["X-RateLimit-Remaining"] = str(decision.remaining)
        response["X-RateLimit-Reset"] = str(int(decision.reset_at))
        return response


class SecurityHeadersMiddleware:
    """Adiciona Content-Security-Policy e X-API-Version."""
    
    def __init__(self, get_response):
        self.get_response = get_response
        self.csp = getattr(settings, "CONTENT_SECURITY_POLICY", DEFAULT_CSP)
        self.api_version = getattr(settings, "API_VERSION", "1.0.0")
    
    def __call__(self, request):
        response = self.get_response(request)
        
        response.setdefault("Content-Security-Policy", self.csp)
        response["X-API-Version"] = self.api_version
        
        for header in ("Server", "X-Powered-By"):
            if header in response:
                del response[header]
        
        return response
