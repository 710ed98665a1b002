"""
Componentes compartilhados do Core.

- Hierarquia de exceções (mapeada para status HTTP nas API views)
- DomainEvent, base dos eventos de usuário
- UnitOfWork e EventPublisher (ports de transação e mensageria)
"""

from .exceptions import (
    DomainException,
    ValidationError,
    InvalidFormatError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    DuplicateIdentityError,
)
from .events import DomainEvent
from .interfaces import EventPublisher, UnitOfWork

__all__ = [
    "DomainException",
    "ValidationError",
    "InvalidFormatError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "DuplicateIdentityError",
    "DomainEvent",
    "EventPublisher",
    "UnitOfWork",
]
