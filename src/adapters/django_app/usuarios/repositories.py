"""
Repositórios Django para persistência de Usuários.

Implementam o UsuarioRepository definido no Core.
São DRIVEN ADAPTERS - acionados pelos use cases.

Buscas por e-mail e CPF usam sempre a forma canônica gravada
pelo mapper. As constraints únicas do banco cobrem a janela entre
a verificação de unicidade do serviço e o INSERT.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging
import uuid

from django.db import IntegrityError

from src.core.users.entities import UsuarioEntity
from src.core.shared.exceptions import DuplicateIdentityError

from ..shared.repository import BaseRepository, PaginationParams, SortParams
from .models import UsuarioModel
from .mappers import UsuarioMapper

logger = logging.getLogger(__name__)


# Filtro do domínio → lookup do ORM
FILTER_LOOKUPS = {
    "nome": "nome__icontains",
    "email": "email__icontains",
    "cpf": "cpf",
    "criado_apos": "criado_em__gte",
    "criado_antes": "criado_em__lte",
}


class DjangoUsuarioRepository(BaseRepository[UsuarioEntity, UsuarioModel]):
    """
    Implementação Django do UsuarioRepository.
    
    Example:
        repo = DjangoUsuarioRepository()
        repo.save(usuario)
        usuario = repo.get_by_email("maria@example.com")
        pagina, total = repo.list_paginated({"nome": "maria"}, pagina=1)
    """
    
    model_class = UsuarioModel
    
    def to_entity(self, model: UsuarioModel) -> UsuarioEntity:
        return UsuarioMapper.to_entity(model)
    
    def to_model(self, entity: UsuarioEntity) -> UsuarioModel:
        return UsuarioMapper.to_model(entity)
    
    def proximo_id(self) -> str:
        return str(uuid.uuid4())
    
    def _on_integrity_error(self, entity: UsuarioEntity, error: IntegrityError) -> None:
        outros = UsuarioModel.objects.exclude(id=entity.id)
        
        if outros.filter(email=entity.email.valor).exists():
            raise DuplicateIdentityError("email", entity.email.valor) from error
        
        if outros.filter(cpf=entity.cpf.valor).exists():
            raise DuplicateIdentityError("cpf", entity.cpf.formatado) from error
        
        raise error
    
    def get_by_email(self, email: str) -> Optional[UsuarioEntity]:
        model = self._get_base_queryset().filter(email=email).first()
        return self.to_entity(model) if model else None
    
    def get_by_cpf(self, cpf: str) -> Optional[UsuarioEntity]:
        model = self._get_base_queryset().filter(cpf=cpf).first()
        return self.to_entity(model) if model else None
    
    def exists_by_email(self, email: str) -> bool:
        return UsuarioModel.objects.filter(email=email).exists()
    
    def exists_by_cpf(self, cpf: str) -> bool:
        return UsuarioModel.objects.filter(cpf=cpf).exists()
    
    def list_paginated(
        self,
        filtros: Dict[str, Any],
        pagina: int = 1,
        por_pagina: int = 10,
        ordenar_por: str = "criado_em",
        ordem: str = "desc",
    ) -> Tuple[List[UsuarioEntity], int]:
        return self._query_paginated(
            PaginationParams(page=pagina, per_page=por_pagina),
            SortParams(field=ordenar_por, direction=ordem),
            self._build_filters(filtros),
        )
    
    def count(self, filtros: Optional[Dict[str, Any]] = None) -> int:
        return super().count(self._build_filters(filtros or {}))
    
    @staticmethod
    def _build_filters(filtros: Dict[str, Any]) -> Dict[str, Any]:
        return {
            FILTER_LOOKUPS[chave]: valor
            for chave, valor in filtros.items()
            if chave in FILTER_LOOKUPS and valor not in (None, "")
        }
