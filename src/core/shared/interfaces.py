"""
Interfaces (Ports) - Contratos entre Core e Adapters.

São os "Ports" da Arquitetura Hexagonal: o Core define as interfaces
e os Adapters (Django, Celery, memória) as implementam.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.
    
    Pattern: Context Manager
        with uow:
            repo.save(usuario)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção
    
    Eventos enfileirados só são publicados após commit bem-sucedido;
    em caso de rollback são descartados.
    """
    
    def __init__(self):
        self._events: List[DomainEvent] = []
    
    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções
    
    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError
    
    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.
        
        Ordem de execução:
        1. Commit da transação no banco
        2. Publicação de eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError
    
    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError
    
    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.
        
        Example:
            with uow:
                repo.save(usuario)
                uow.publish_event(UsuarioCriadoEvent(aggregate_id=usuario.id))
            # Evento publicado aqui, após commit
        """
        self._events.append(event)
    
    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.
    
    Adapters implementam para integrar com diferentes
    sistemas de mensageria (Celery, logging, memória).
    """
    
    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError
    
    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
