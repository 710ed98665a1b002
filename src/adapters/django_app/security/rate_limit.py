"""
Rate limiting por janela deslizante.

Cada cliente (IP) tem uma lista de timestamps das requisições aceitas
dentro da janela. O estado pertence a uma instância de
SlidingWindowRateLimiter, guardado no cache do Django (LocMem em dev,
Redis em produção) e protegido por lock dentro do processo.
"""

from dataclasses import dataclass
import logging
import threading
import time
from typing import Callable, List

from django.core.cache import cache as default_cache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Resultado da verificação de uma requisição."""
    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch (segundos)
    
    @property
    def retry_after(self) -> int:
        return max(0, int(round(self.reset_at - time.time())))


class SlidingWindowRateLimiter:
    """
    Limitador de requisições por janela deslizante.
    
    Example:
        limiter = SlidingWindowRateLimiter(window_seconds=60, max_requests=100)
        decision = limiter.hit("203.0.113.10")
        if not decision.allowed:
            ...  # 429
    """
    
    key_prefix = "ratelimit"
    
    def __init__(
        self,
        window_seconds: int = 60,
        max_requests: int = 100,
        store=None,
        clock: Callable[[], float] = time.time,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._store = store if store is not None else default_cache
        self._clock = clock
        self._lock = threading.Lock()
    
    def _key(self, client_id: str) -> str:
        return f"{self.key_prefix}:{client_id}"
    
    def hit(self, client_id: str) -> RateLimitDecision:
        """Registra a requisição, se houver espaço na janela, e decide."""
        with self._lock:
            agora = self._clock()
            key = self._key(client_id)
            
            timestamps: List[float] = [
                ts for ts in (self._store.get(key) or [])
                if agora - ts < self.window_seconds
            ]
            
            if len(timestamps) >= self.max_requests:
                # Libera quando o mais antigo sair da janela
                reset_at = timestamps[0] + self.window_seconds
                return RateLimitDecision(False, self.max_requests, 0, reset_at)
            
            timestamps.append(agora)
            self._store.set(key, timestamps, timeout=self.window_seconds)
            
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - len(timestamps),
                reset_at=agora + self.window_seconds,
            )
    
    def reset(self, client_id: str) -> None:
        with self._lock:
            self._store.delete(self._key(client_id))


def get_client_ip(request) -> str:
    """
    IP do cliente.
    
    Prioridade: X-Forwarded-For (primeiro da lista) > X-Real-IP > REMOTE_ADDR
    """
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    
    real_ip = request.META.get("HTTP_X_REAL_IP")
    if real_ip:
        return real_ip.strip()
    
    return request.META.get("REMOTE_ADDR") or "unknown"
