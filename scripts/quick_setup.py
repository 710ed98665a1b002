#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cadastra usuários de exemplo pela camada de serviços (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Raiz do projeto no path (o pacote é `src`)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


SAMPLE_USERS = [
    {
        'nome': 'Maria Silva',
        'email': 'maria.silva@example.com',
        'senha': 'S3nha!forte',
        'cpf': '111.444.777-35',
        'telefone': '(11) 98765-4321',
    },
    {
        'nome': 'João Souza',
        'email': 'joao.souza@example.com',
        'senha': 'Outr@senha1',
        'cpf': '529.982.247-25',
        'telefone': '(21) 3456-7890',
    },
    {
        'nome': 'Ana Lima',
        'email': 'ana.lima@example.com',
        'senha': 'An@Lima2024',
        'cpf': '123.456.789-09',
    },
]


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')
    
    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'
    
    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command
    
    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cadastra usuários de exemplo (idempotente)."""
    from src.config.container import get_container
    from src.core.shared.exceptions import DuplicateIdentityError
    from src.core.users.dtos import CriarUsuarioInputDTO
    
    service = get_container().criar_usuario_service
    criados = 0
    
    print("📝 Cadastrando usuários de exemplo...")
    
    for dados in SAMPLE_USERS:
        try:
            usuario = service().execute(CriarUsuarioInputDTO(**dados))
        except DuplicateIdentityError as e:
            print(f"   • {dados['email']}: {e.message}")
            continue
        criados += 1
        print(f"   ✓ {usuario.nome} <{usuario.email}> {usuario.cpf}")
    
    print(f"✅ {criados} usuário(s) criado(s)!")


def check_connection():
    """Verifica conexão com o banco."""
    from src.adapters.django_app.shared.database import check_database_connection
    
    print("🔍 Verificando conexão com o banco...")
    
    resultado = check_database_connection()
    if resultado['healthy']:
        print(f"✅ Conexão OK! ({resultado['vendor']}, {resultado['latency_ms']}ms)")
        return True
    
    print(f"❌ Erro de conexão: {resultado['error']}")
    return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings
    
    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Acesse: http://localhost:8000/api/usuarios/")
    print("   3. Acesse: http://localhost:8000/health/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Cadastrar usuários de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )
    
    args = parser.parse_args()
    
    print("\n" + "=" * 60)
    print("🔧 Gestão de Usuários - Quick Setup")
    print("=" * 60 + "\n")
    
    setup_django()
    
    if args.check_only:
        check_connection()
        return
    
    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return
    
    run_migrations()
    
    if args.with_sample_data:
        create_sample_data()
    
    show_info()


if __name__ == '__main__':
    main()
