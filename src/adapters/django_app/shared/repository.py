"""
Repository Base - Implementação base de repositórios com Django ORM.

Fornece funcionalidades comuns para os repositórios:
- CRUD básico (save via update_or_create)
- Paginação e ordenação
- Filtros por lookups do ORM

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar
import logging

from django.db import IntegrityError, models, transaction
from django.db.models import QuerySet

logger = logging.getLogger(__name__)

# Type variables
T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


@dataclass
class PaginationParams:
    """Parâmetros de paginação."""
    page: int = 1
    per_page: int = 10
    
    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class SortParams:
    """Parâmetros de ordenação."""
    field: str = "criado_em"
    direction: str = "desc"  # asc ou desc
    
    @property
    def order_by(self) -> str:
        """Retorna string para QuerySet.order_by()."""
        prefix = "-" if self.direction == "desc" else ""
        return f"{prefix}{self.field}"


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base abstrata para repositórios Django.
    
    Type Parameters:
        T: Tipo da entidade de domínio
        M: Tipo do Model Django
    
    Example:
        class DjangoUsuarioRepository(BaseRepository[UsuarioEntity, UsuarioModel]):
            model_class = UsuarioModel
            
            def to_entity(self, model):
                return UsuarioMapper.to_entity(model)
            
            def to_model(self, entity):
                return UsuarioMapper.to_model(entity)
    """
    
    # Classe do model Django (definir na subclasse)
    model_class: Type[M]
    
    # Campo padrão de ordenação
    default_order_field: str = "-criado_em"
    
    @abstractmethod
    def to_entity(self, model: M) -> T:
        raise NotImplementedError
    
    @abstractmethod
    def to_model(self, entity: T) -> M:
        raise NotImplementedError
    
    def _get_base_queryset(self) -> QuerySet[M]:
        return self.model_class.objects.all()
    
    def _on_integrity_error(self, entity: T, error: IntegrityError) -> None:
        """
        Traduz violação de constraint em erro de domínio.
        
        A implementação padrão apenas repropaga; subclasses com
        colunas únicas sobrescrevem.
        """
        raise error
    
    def save(self, entity: T) -> None:
        """
        Persiste entidade (create ou update).
        
        O savepoint próprio mantém a transação externa utilizável
        quando uma constraint é violada.
        """
        model = self.to_model(entity)
        
        model_dict = {}
        for field in model._meta.fields:
            if not field.primary_key:
                model_dict[field.name] = getattr(model, field.name)
        
        try:
            with transaction.atomic():
                self.model_class.objects.update_or_create(
                    id=getattr(entity, "id"),
                    defaults=model_dict,
                )
        except IntegrityError as e:
            logger.warning(
                f"{self.model_class.__name__} integrity error | id={entity.id} | {e}"
            )
            self._on_integrity_error(entity, e)
            return
        
        logger.debug(f"{self.model_class.__name__} saved: {entity.id}")
    
    def get_by_id(self, entity_id: str) -> Optional[T]:
        try:
            model = self._get_base_queryset().get(id=entity_id)
            return self.to_entity(model)
        except self.model_class.DoesNotExist:
            return None
    
    def delete(self, entity_id: str) -> bool:
        """
        Remove entidade.
        
        Returns:
            True se removido, False se não existia
        """
        deleted_count, _ = self.model_class.objects.filter(id=entity_id).delete()
        return deleted_count > 0
    
    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        qs = self._get_base_queryset()
        if filters:
            qs = self._apply_filters(qs, filters)
        return qs.count()
    
    def _query_paginated(
        self,
        pagination: PaginationParams,
        sort: Optional[SortParams] = None,
        filters: Optional[Dict[str, Any]] = None,
    ) -> Tuple[List[T], int]:
        """
        Lista entidades com paginação e filtros.
        
        Returns:
            Tupla (entidades da página, total sem paginação)
        """
        qs = self._get_base_queryset()
        
        if filters:
            qs = self._apply_filters(qs, filters)
        
        order_by = sort.order_by if sort else self.default_order_field
        # Desempate estável por id entre registros com a mesma chave
        qs = qs.order_by(order_by, "id")
        
        total = qs.count()
        
        models_page = qs[pagination.offset:pagination.offset + pagination.per_page]
        entities = [self.to_entity(m) for m in models_page]
        
        return entities, total
    
    def _apply_filters(self, qs: QuerySet[M], filters: Dict[str, Any]) -> QuerySet[M]:
        """
        Aplica filtros ao queryset.
        
        As chaves são lookups do ORM (ex: nome__icontains,
        criado_em__gte); listas viram __in; None é ignorado.
        """
        for key, value in filters.items():
            if value is None:
                continue
            
            if isinstance(value, list):
                qs = qs.filter(**{f"{key}__in": value})
            else:
                qs = qs.filter(**{key: value})
        
        return qs
