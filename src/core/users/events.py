"""
Domain Events do Domínio de Usuários.

Eventos:
- UsuarioCriadoEvent: Novo usuário cadastrado
- UsuarioAtualizadoEvent: Dados do usuário alterados
- UsuarioRemovidoEvent: Usuário excluído

Uso:
    with uow:
        repo.save(usuario)
        uow.publish_event(UsuarioCriadoEvent(aggregate_id=usuario.id, ...))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.core.shared.events import DomainEvent


@dataclass
class UsuarioCriadoEvent(DomainEvent):
    """
    Evento: Usuário foi cadastrado.
    
    Handlers típicos:
    - Incrementar métrica de cadastros
    - Enviar e-mail de boas-vindas
    """
    
    nome: str = ""
    email: str = ""
    
    @property
    def aggregate_type(self) -> str:
        return "Usuario"


@dataclass
class UsuarioAtualizadoEvent(DomainEvent):
    """Evento: Usuário teve dados alterados (campos_alterados lista os nomes)."""
    
    campos_alterados: List[str] = field(default_factory=list)
    
    @property
    def aggregate_type(self) -> str:
        return "Usuario"
    
    def _get_event_data(self) -> Dict[str, Any]:
        return {"campos_alterados": list(self.campos_alterados)}


@dataclass
class UsuarioRemovidoEvent(DomainEvent):
    
    email: str = ""
    
    @property
    def aggregate_type(self) -> str:
        return "Usuario"
