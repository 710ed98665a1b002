"""
Event Publishers - Publicadores de Eventos de Domínio.

Implementações:
- LoggingEventPublisher: Loga e executa handlers locais (sync/hybrid)
- CeleryEventPublisher: Envia para o Celery (async)
- InMemoryEventPublisher: Para testes

Todos executam os handlers locais registrados (ex: métricas de
cadastro), independente de haver despacho para o Celery.
"""

from typing import Callable, Dict, List, Optional
import logging
import json

from django.conf import settings

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class BaseEventPublisher(EventPublisher):
    """Registro de handlers síncronos por tipo de evento."""
    
    def __init__(self):
        self._handlers: Dict[str, List[Callable[[DomainEvent], None]]] = {}
    
    def register_handler(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], None]
    ) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
    
    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        # Falha de handler não desfaz a operação já commitada
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Erro em handler para {event.event_type}")
    
    @staticmethod
    def _send_to_celery(event: DomainEvent) -> None:
        from src.adapters.django_app.events.handlers import dispatch_domain_event
        dispatch_domain_event.delay(event.event_type, event.to_dict())


class LoggingEventPublisher(BaseEventPublisher):
    """
    Publisher que loga eventos e executa handlers locais.
    
    Com dispatch_to_celery=True (modo hybrid) também envia ao Celery.
    """
    
    def __init__(self, log_level: int = logging.INFO, dispatch_to_celery: bool = False):
        super().__init__()
        self._log_level = log_level
        self._dispatch_to_celery = dispatch_to_celery
    
    def publish(self, event: DomainEvent) -> None:
        event_data = event.to_dict()
        
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event_data, default=str)}"
        )
        
        if self._dispatch_to_celery:
            try:
                self._send_to_celery(event)
            except Exception as e:
                logger.warning(f"Falha ao despachar para Celery: {e}")
        
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(BaseEventPublisher):
    """Publisher que envia eventos para Celery (produção)."""
    
    def __init__(self, also_log: bool = True):
        super().__init__()
        self._also_log = also_log
    
    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )
        
        try:
            self._send_to_celery(event)
        except Exception as e:
            # Broker fora do ar não quebra o fluxo principal
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)
        
        self._dispatch_to_handlers(event)


class InMemoryEventPublisher(BaseEventPublisher):
    """
    Publisher em memória para testes.
    
    Armazena eventos publicados para verificação.
    """
    
    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []
    
    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)
    
    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()
    
    def clear(self) -> None:
        self._published_events.clear()
    
    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]


_publisher: Optional[EventPublisher] = None


def build_event_publisher(mode: str) -> EventPublisher:
    """
    Cria publisher para o modo informado.
    
    Modos:
        sync: apenas log + handlers locais
        async: Celery + handlers locais
        hybrid: log + Celery + handlers locais
    """
    if mode == "async":
        return CeleryEventPublisher()
    return LoggingEventPublisher(dispatch_to_celery=(mode == "hybrid"))


def get_event_publisher() -> EventPublisher:
    """Publisher do processo, criado conforme EVENT_PUBLISHER_MODE."""
    global _publisher
    if _publisher is None:
        _publisher = build_event_publisher(getattr(settings, "EVENT_PUBLISHER_MODE", "sync"))
    return _publisher


def reset_event_publisher() -> None:
    global _publisher
    _publisher = None
