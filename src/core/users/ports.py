"""
Ports (Interfaces) do Domínio de Usuários.

Define os contratos que os adapters de persistência e de hash
de senha devem implementar. O Core depende apenas destes Protocols.

Os repositórios trabalham sempre com a forma canônica de e-mail e CPF:
é por ela que a unicidade e as buscas são feitas.

Example:
    class DjangoUsuarioRepository:
        def save(self, usuario: UsuarioEntity) -> None:
            UsuarioModel.objects.update_or_create(...)
"""

from datetime import datetime
import hashlib
import hmac
from typing import Any, Dict, List, Optional, Protocol, Tuple
import uuid

from src.core.shared.exceptions import DuplicateIdentityError
from .entities import UsuarioEntity


CAMPOS_ORDENACAO = ("nome", "email", "criado_em")


class UsuarioRepository(Protocol):
    """
    Interface para persistência de usuários.
    
    Note:
        Protocol permite duck typing; adapters não precisam herdar.
    """
    
    def proximo_id(self) -> str:
        """Gera o identificador de um novo usuário."""
        ...
    
    def save(self, usuario: UsuarioEntity) -> None:
        """
        Persiste usuário (create ou update).
        
        Raises:
            DuplicateIdentityError: Se e-mail ou CPF já pertencem a outro usuário
        """
        ...
    
    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        ...
    
    def get_by_email(self, email: str) -> Optional[UsuarioEntity]:
        """Busca pelo e-mail canônico."""
        ...
    
    def get_by_cpf(self, cpf: str) -> Optional[UsuarioEntity]:
        """Busca pelo CPF canônico (11 dígitos)."""
        ...
    
    def exists_by_email(self, email: str) -> bool:
        ...
    
    def exists_by_cpf(self, cpf: str) -> bool:
        ...
    
    def delete(self, usuario_id: str) -> bool:
        """Remove usuário. Retorna False se não existia."""
        ...
    
    def list_paginated(
        self,
        filtros: Dict[str, Any],
        pagina: int = 1,
        por_pagina: int = 10,
        ordenar_por: str = "criado_em",
        ordem: str = "desc",
    ) -> Tuple[List[UsuarioEntity], int]:
        """
        Lista uma página de usuários.
        
        Filtros aceitos: nome e email (parciais, case-insensitive),
        cpf (exato), criado_apos e criado_antes.
        
        Returns:
            Tupla (usuários da página, total sem paginação)
        """
        ...
    
    def count(self, filtros: Optional[Dict[str, Any]] = None) -> int:
        ...


class PasswordHasher(Protocol):
    """Interface para hash de senhas."""
    
    def hash(self, senha: str) -> str:
        ...
    
    def verificar(self, senha: str, senha_hash: str) -> bool:
        ...


class InMemoryUsuarioRepository:
    """
    Implementação em memória do UsuarioRepository.
    
    Útil para testes unitários e prototipagem. Não usar em produção!
    
    Example:
        repo = InMemoryUsuarioRepository()
        repo.save(usuario)
        found = repo.get_by_email("maria@example.com")
    """
    
    def __init__(self):
        self._usuarios: Dict[str, UsuarioEntity] = {}
    
    def proximo_id(self) -> str:
        return str(uuid.uuid4())
    
    def save(self, usuario: UsuarioEntity) -> None:
        for outro in self._usuarios.values():
            if outro.id == usuario.id:
                continue
            if outro.email == usuario.email:
                raise DuplicateIdentityError("email", usuario.email.valor)
            if outro.cpf == usuario.cpf:
                raise DuplicateIdentityError("cpf", usuario.cpf.formatado)
        self._usuarios[usuario.id] = usuario
    
    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        return self._usuarios.get(usuario_id)
    
    def get_by_email(self, email: str) -> Optional[UsuarioEntity]:
        return next(
            (u for u in self._usuarios.values() if u.email.valor == email),
            None,
        )
    
    def get_by_cpf(self, cpf: str) -> Optional[UsuarioEntity]:
        return next(
            (u for u in self._usuarios.values() if u.cpf.valor == cpf),
            None,
        )
    
    def exists_by_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None
    
    def exists_by_cpf(self, cpf: str) -> bool:
        return self.get_by_cpf(cpf) is not None
    
    def delete(self, usuario_id: str) -> bool:
        return self._usuarios.pop(usuario_id, None) is not None
    
    def list_paginated(
        self,
        filtros: Dict[str, Any],
        pagina: int = 1,
        por_pagina: int = 10,
        ordenar_por: str = "criado_em",
        ordem: str = "desc",
    ) -> Tuple[List[UsuarioEntity], int]:
        usuarios = self._filtrar(filtros)
        usuarios.sort(
            key=lambda u: self._chave_ordenacao(u, ordenar_por),
            reverse=(ordem == "desc"),
        )
        inicio = (pagina - 1) * por_pagina
        return usuarios[inicio:inicio + por_pagina], len(usuarios)
    
    def count(self, filtros: Optional[Dict[str, Any]] = None) -> int:
        return len(self._filtrar(filtros or {}))
    
    def clear(self) -> None:
        self._usuarios.clear()
    
    def _filtrar(self, filtros: Dict[str, Any]) -> List[UsuarioEntity]:
        nome = (filtros.get("nome") or "").lower()
        email = (filtros.get("email") or "").lower()
        cpf = filtros.get("cpf")
        criado_apos: Optional[datetime] = filtros.get("criado_apos")
        criado_antes: Optional[datetime] = filtros.get("criado_antes")
        
        return [
            u for u in self._usuarios.values()
            if nome in u.nome.lower()
            and email in u.email.valor
            and (not cpf or u.cpf.valor == cpf)
            and (criado_apos is None or u.criado_em >= criado_apos)
            and (criado_antes is None or u.criado_em <= criado_antes)
        ]
    
    @staticmethod
    def _chave_ordenacao(usuario: UsuarioEntity, campo: str):
        if campo == "email":
            return usuario.email.valor
        if campo == "nome":
            return usuario.nome
        return usuario.criado_em


class InMemoryPasswordHasher:
    """
    Hash SHA-256 simples, para testes e para o TestingContainer.
    
    Não usar em produção: sem salt nem iterações.
    """
    
    prefixo = "sha256$"
    
    def hash(self, senha: str) -> str:
        return self.prefixo + hashlib.sha256(senha.encode("utf-8")).hexdigest()
    
    def verificar(self, senha: str, senha_hash: str) -> bool:
        return hmac.compare_digest(self.hash(senha), senha_hash)
