"""
Configurações globais do Pytest para a Gestão de Usuários.

Este arquivo é carregado automaticamente pelo pytest e configura:
- Django settings para testes (SQLite em memória, cache LocMem)
- Fixtures compartilhadas (repositórios InMemory, UoW, usuários)
- Limpeza de singletons entre testes
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes."""
    config.addinivalue_line(
        "markers", "integration: testes que usam o banco via Django ORM"
    )
    
    import django
    from corsheaders.defaults import default_headers
    from django.conf import settings
    
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            ALLOWED_HOSTS=['testserver', 'localhost'],
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.auth',
                'django.contrib.contenttypes',
                'django.contrib.sessions',
                'django.contrib.messages',
                'corsheaders',
                'src.adapters.django_app.usuarios',
            ],
            MIDDLEWARE=[
                'src.adapters.django_app.monitoring.middleware.RequestLoggingMiddleware',
                'corsheaders.middleware.CorsMiddleware',
                'django.middleware.security.SecurityMiddleware',
                'src.adapters.django_app.security.middleware.SecurityHeadersMiddleware',
                'src.adapters.django_app.security.middleware.RateLimitMiddleware',
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.middleware.common.CommonMiddleware',
                'django.middleware.csrf.CsrfViewMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
                'django.contrib.messages.middleware.MessageMiddleware',
                'django.middleware.clickjacking.XFrameOptionsMiddleware',
            ],
            TEMPLATES=[
                {
                    'BACKEND': 'django.template.backends.django.DjangoTemplates',
                    'APP_DIRS': True,
                    'OPTIONS': {
                        'context_processors': [
                            'django.template.context_processors.request',
                            'django.contrib.auth.context_processors.auth',
                            'django.contrib.messages.context_processors.messages',
                        ],
                    },
                },
            ],
            ROOT_URLCONF='src.config.urls',
            CACHES={
                'default': {
                    'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
                }
            },
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            CORS_ALLOWED_ORIGINS=['http://localhost:3000'],
            CORS_ALLOW_HEADERS=(*default_headers, 'x-api-key', 'x-request-id'),
            CORS_EXPOSE_HEADERS=['X-RateLimit-Limit', 'X-RateLimit-Remaining', 'X-Request-ID'],
            RATE_LIMIT={
                'WINDOW_SECONDS': 60,
                'MAX_REQUESTS': 1000,
                'EXEMPT_PATHS': ('/health/', '/metrics/'),
            },
            X_FRAME_OPTIONS='DENY',
            API_VERSION='1.0.0',
            ENVIRONMENT='test',
            EVENT_PUBLISHER_MODE='sync',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='America/Sao_Paulo',
        )
        django.setup()


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset de singletons entre testes.
    
    Garante que cada teste inicia com container e rate limit limpos.
    """
    from django.core.cache import cache
    from src.config.container import reset_container
    
    cache.clear()
    yield
    reset_container()
    cache.clear()


# =============================================================================
# Fixtures de domínio
# =============================================================================

CPF_VALIDO = "111.444.777-35"
OUTRO_CPF_VALIDO = "529.982.247-25"


@pytest.fixture
def cpf_valido():
    return CPF_VALIDO


@pytest.fixture
def outro_cpf_valido():
    return OUTRO_CPF_VALIDO


@pytest.fixture
def inmemory_usuario_repo():
    """Repositório em memória para testes unitários."""
    from src.core.users.ports import InMemoryUsuarioRepository
    return InMemoryUsuarioRepository()


@pytest.fixture
def inmemory_hasher():
    from src.core.users.ports import InMemoryPasswordHasher
    return InMemoryPasswordHasher()


@pytest.fixture
def inmemory_uow():
    """Unit of Work em memória para testes unitários."""
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork()


@pytest.fixture
def sample_usuario_entity():
    """Usuário válido com telefone."""
    from src.core.users.entities import UsuarioEntity
    
    return UsuarioEntity.criar(
        id="usr-0001",
        nome="João da Silva",
        email="JOAO@EXAMPLE.COM",
        senha="sha256$hash",
        cpf=CPF_VALIDO,
        telefone="(11) 98765-4321",
    )


@pytest.fixture
def testing_container():
    """Container principal com infraestrutura InMemory."""
    from src.config.container import build_testing_container
    return build_testing_container()
