"""
Unit of Work - Implementação Django.

Gerencia a transação de um use case, garantindo consistência
entre o estado persistido e os eventos publicados.

Responsabilidades:
- Abrir/fechar bloco transaction.atomic
- Commit/Rollback coordenado
- Publicar eventos somente após commit bem-sucedido
"""

from typing import List, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import EventPublisher, UnitOfWork
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.
    
    Usa transaction.atomic, então funciona tanto no nível mais externo
    (transação real) quanto aninhado em outro bloco atômico (savepoint),
    como acontece com ATOMIC_REQUESTS ou nos testes.
    
    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            repo.save(usuario)
            uow.publish_event(UsuarioCriadoEvent(...))
        # Commit automático + eventos publicados
    """
    
    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None
        self._committed = False
        self._rolled_back = False
    
    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self.clear_events()
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")
    
    def commit(self) -> None:
        """
        Ordem de execução:
        1. Commit (ou liberação do savepoint)
        2. Publicação dos eventos
        3. Limpeza de estado interno
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return
        
        atomic, self._atomic = self._atomic, None
        if atomic is not None:
            try:
                atomic.__exit__(None, None, None)
            except Exception as e:
                logger.error(f"Commit failed: {e}")
                self._rolled_back = True
                self.clear_events()
                raise
            logger.debug("Transaction committed")
        
        self._committed = True
        self._publish_events()
    
    def rollback(self) -> None:
        if self._committed or self._rolled_back:
            return
        
        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                transaction.set_rollback(True)
                atomic.__exit__(None, None, None)
                logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()
    
    def _publish_events(self) -> None:
        for event in self._events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )
            
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    # Dados já commitados; falha de publicação só é registrada
                    logger.error(f"Failed to publish event: {e}")
        
        self.clear_events()
    
    @property
    def is_committed(self) -> bool:
        return self._committed
    
    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.
    
    Não persiste nada - apenas simula o ciclo de commit/rollback e,
    se houver publisher, entrega os eventos após o "commit".
    
    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)
        
        assert uow.committed
        assert len(uow.published_events) == 1
    """
    
    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []
    
    def _begin_transaction(self) -> None:
        pass
    
    def commit(self) -> None:
        self._committed = True
        self._published_events.extend(self._events)
        if self._event_publisher:
            self._event_publisher.publish_batch(list(self._events))
        self.clear_events()
    
    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()
    
    @property
    def committed(self) -> bool:
        return self._committed
    
    @property
    def rolled_back(self) -> bool:
        return self._rolled_back
    
    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events
    
    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
