"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, hasher)
- Factory: Nova instância por chamada (services, UoW)
- Callable: Publisher do processo (definido por EVENT_PUBLISHER_MODE)
"""

import importlib
from typing import Callable, Optional

from dependency_injector import containers, providers


def _lazy(module_path: str, name: str) -> Callable:
    """
    Adia o import até o provider ser chamado.
    
    Models Django só podem ser importados após o registro de apps.
    """
    def factory(*args, **kwargs):
        target = getattr(importlib.import_module(module_path), name)
        return target(*args, **kwargs)
    factory.__name__ = name
    return factory


_USE_CASES = 'src.core.users.use_cases'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.
    
    Example:
        from src.config.container import get_container
        
        service = get_container().criar_usuario_service()
        result = service.execute(input_dto)
    """
    
    config = providers.Configuration()
    
    # =========================================================================
    # Infrastructure
    # =========================================================================
    
    event_publisher = providers.Callable(
        _lazy('src.adapters.django_app.events.publishers', 'get_event_publisher')
    )
    
    password_hasher = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.hashers', 'DjangoPasswordHasher')
    )
    
    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================
    
    usuario_repository = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.repositories', 'DjangoUsuarioRepository')
    )
    
    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================
    
    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )
    
    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================
    
    criar_usuario_service = providers.Factory(
        _lazy(_USE_CASES, 'CriarUsuarioService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )
    
    atualizar_usuario_service = providers.Factory(
        _lazy(_USE_CASES, 'AtualizarUsuarioService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )
    
    remover_usuario_service = providers.Factory(
        _lazy(_USE_CASES, 'RemoverUsuarioService'),
        usuario_repo=usuario_repository,
        uow=unit_of_work,
    )
    
    # Leitura (sem UoW)
    obter_usuario_service = providers.Factory(
        _lazy(_USE_CASES, 'ObterUsuarioService'),
        usuario_repo=usuario_repository,
    )
    
    buscar_usuario_por_email_service = providers.Factory(
        _lazy(_USE_CASES, 'BuscarUsuarioPorEmailService'),
        usuario_repo=usuario_repository,
    )
    
    buscar_usuario_por_cpf_service = providers.Factory(
        _lazy(_USE_CASES, 'BuscarUsuarioPorCPFService'),
        usuario_repo=usuario_repository,
    )
    
    listar_usuarios_service = providers.Factory(
        _lazy(_USE_CASES, 'ListarUsuariosService'),
        usuario_repo=usuario_repository,
    )
    
    contar_usuarios_service = providers.Factory(
        _lazy(_USE_CASES, 'ContarUsuariosService'),
        usuario_repo=usuario_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.
    
    Cria se não existir (lazy initialization).
    """
    global _container
    
    if _container is None:
        _container = Container()
    
    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

class TestingContainer(containers.DeclarativeContainer):
    """
    Infraestrutura InMemory para testes rápidos.
    
    Sobrescreve os providers de mesmo nome do Container principal.
    
    Example:
        container = build_testing_container()
        container.criar_usuario_service().execute(dto)
        container.event_publisher().published_events
    """
    
    usuario_repository = providers.Singleton(
        _lazy('src.core.users.ports', 'InMemoryUsuarioRepository')
    )
    
    password_hasher = providers.Singleton(
        _lazy('src.core.users.ports', 'InMemoryPasswordHasher')
    )
    
    event_publisher = providers.Singleton(
        _lazy('src.adapters.django_app.events.publishers', 'InMemoryEventPublisher')
    )
    
    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work', 'InMemoryUnitOfWork'),
        event_publisher=event_publisher,
    )


def build_testing_container() -> Container:
    """Container principal com a infraestrutura trocada por InMemory."""
    container = Container()
    container.override(TestingContainer())
    return container
