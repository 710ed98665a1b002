"""
Domínio de Usuários - Cadastro e identidade.

Este módulo contém a lógica de negócio do cadastro de usuários:
- Value Objects (CPF, Email, Telefone)
- Entidade (UsuarioEntity), imutável com atualização copy-on-write
- Use Cases (CriarUsuario, AtualizarUsuario, ListarUsuarios, ...)
- Domain Events (UsuarioCriado, UsuarioAtualizado, UsuarioRemovido)
- DTOs e Ports (repositório e hash de senha)
"""

from .value_objects import CPF, Email, Telefone
from .entities import UsuarioEntity
from .events import (
    UsuarioCriadoEvent,
    UsuarioAtualizadoEvent,
    UsuarioRemovidoEvent,
)
from .dtos import (
    CriarUsuarioInputDTO,
    AtualizarUsuarioInputDTO,
    ListarUsuariosQueryDTO,
    UsuarioOutputDTO,
    PaginatedResultDTO,
)
from .ports import UsuarioRepository, PasswordHasher
from .use_cases import (
    CriarUsuarioService,
    ObterUsuarioService,
    BuscarUsuarioPorEmailService,
    BuscarUsuarioPorCPFService,
    AtualizarUsuarioService,
    RemoverUsuarioService,
    ListarUsuariosService,
    ContarUsuariosService,
)

__all__ = [
    # Value Objects
    "CPF",
    "Email",
    "Telefone",
    # Entities
    "UsuarioEntity",
    # Events
    "UsuarioCriadoEvent",
    "UsuarioAtualizadoEvent",
    "UsuarioRemovidoEvent",
    # DTOs
    "CriarUsuarioInputDTO",
    "AtualizarUsuarioInputDTO",
    "ListarUsuariosQueryDTO",
    "UsuarioOutputDTO",
    "PaginatedResultDTO",
    # Ports
    "UsuarioRepository",
    "PasswordHasher",
    # Use Cases
    "CriarUsuarioService",
    "ObterUsuarioService",
    "BuscarUsuarioPorEmailService",
    "BuscarUsuarioPorCPFService",
    "AtualizarUsuarioService",
    "RemoverUsuarioService",
    "ListarUsuariosService",
    "ContarUsuariosService",
]
