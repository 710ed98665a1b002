"""
Data Transfer Objects (DTOs) do Domínio de Usuários.

DTOs transportam dados entre camadas sem expor a entidade.
O DTO de saída nunca carrega a senha.

Tipos de DTOs:
- Input DTOs: Dados já validados pelos formulários
- Output DTOs: Formato de resposta da API
- Query DTOs: Filtros e paginação de listagens
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from .entities import UsuarioEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarUsuarioInputDTO:
    """
    DTO de entrada para cadastrar usuário.
    
    Attributes:
        nome: Nome completo
        email: E-mail em qualquer caixa (normalizado pelo value object)
        senha: Senha em texto puro (o serviço aplica o hash)
        cpf: CPF com ou sem pontuação
        telefone: Telefone opcional
    """
    
    nome: str
    email: str
    senha: str
    cpf: str
    telefone: Optional[str] = None
    
    def to_dict(self) -> dict:
        """Converte para dicionário (sem a senha)."""
        return {
            "nome": self.nome,
            "email": self.email,
            "cpf": self.cpf,
            "telefone": self.telefone,
        }


@dataclass(frozen=True)
class AtualizarUsuarioInputDTO:
    """
    DTO de entrada para atualização parcial.
    
    Campos None não são alterados; telefone="" remove o telefone.
    """
    
    usuario_id: str
    nome: Optional[str] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    senha: Optional[str] = None
    
    @property
    def campos_informados(self) -> List[str]:
        return [
            campo
            for campo in ("nome", "email", "telefone", "senha")
            if getattr(self, campo) is not None
        ]
    
    def to_dict(self) -> dict:
        return {
            "usuario_id": self.usuario_id,
            "nome": self.nome,
            "email": self.email,
            "telefone": self.telefone,
            "senha_alterada": self.senha is not None,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass(frozen=True)
class UsuarioOutputDTO:
    """
    DTO de saída com os dados públicos do usuário.
    
    E-mail na forma canônica; CPF e telefone na forma de exibição.
    """
    
    id: str
    nome: str
    email: str
    cpf: str
    telefone: str
    criado_em: datetime
    atualizado_em: datetime
    
    @classmethod
    def from_entity(cls, entity: UsuarioEntity) -> "UsuarioOutputDTO":
        publico = entity.to_public()
        return cls(
            id=publico["id"],
            nome=publico["nome"],
            email=publico["email"].valor,
            cpf=publico["cpf"].formatado,
            telefone=publico["telefone"].formatado,
            criado_em=publico["criado_em"],
            atualizado_em=publico["atualizado_em"],
        )
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "cpf": self.cpf,
            "telefone": self.telefone,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class ListarUsuariosQueryDTO:
    """
    DTO para filtros e paginação da listagem de usuários.
    
    Attributes:
        nome: Busca parcial, sem diferenciar maiúsculas
        email: Busca parcial, sem diferenciar maiúsculas
        cpf: Busca exata (aceita CPF formatado)
        criado_apos: Criados a partir desta data
        criado_antes: Criados até esta data
        ordenar_por: nome, email ou criado_em
        ordem: asc ou desc
        pagina: Número da página (1-indexed)
        por_pagina: Itens por página (máximo 100)
    """
    
    nome: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    criado_apos: Optional[datetime] = None
    criado_antes: Optional[datetime] = None
    ordenar_por: str = "criado_em"
    ordem: str = "desc"
    pagina: int = 1
    por_pagina: int = 10
    
    def filtros(self) -> Dict[str, Any]:
        """Somente os filtros informados."""
        valores = {
            "nome": self.nome,
            "email": self.email,
            "cpf": self.cpf,
            "criado_apos": self.criado_apos,
            "criado_antes": self.criado_antes,
        }
        return {chave: valor for chave, valor in valores.items() if valor not in (None, "")}
    
    def to_dict(self) -> dict:
        return {
            **self.filtros(),
            "ordenar_por": self.ordenar_por,
            "ordem": self.ordem,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
        }


@dataclass
class PaginatedResultDTO:
    """
    DTO para resultados paginados.
    
    Attributes:
        items: Lista de itens da página atual
        total: Total de itens (sem paginação)
        pagina: Página atual
        por_pagina: Itens por página
    """
    
    items: List[UsuarioOutputDTO]
    total: int
    pagina: int
    por_pagina: int
    
    @property
    def total_paginas(self) -> int:
        if self.por_pagina <= 0:
            return 0
        return (self.total + self.por_pagina - 1) // self.por_pagina
    
    @property
    def tem_proxima(self) -> bool:
        return self.pagina < self.total_paginas
    
    @property
    def tem_anterior(self) -> bool:
        return self.pagina > 1
    
    def meta(self) -> dict:
        """Metadados de paginação (sem os itens)."""
        return {
            "total": self.total,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
            "total_paginas": self.total_paginas,
            "tem_proxima": self.tem_proxima,
            "tem_anterior": self.tem_anterior,
        }
    
    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            **self.meta(),
        }
