"""
Adapter de hash de senha sobre django.contrib.auth.hashers.

O algoritmo segue PASSWORD_HASHERS das settings (PBKDF2 por padrão).
"""

from django.contrib.auth.hashers import check_password, make_password


class DjangoPasswordHasher:
    """Implementação do PasswordHasher do Core."""
    
    def hash(self, senha: str) -> str:
        return make_password(senha)
    
    def verificar(self, senha: str, senha_hash: str) -> bool:
        return check_password(senha, senha_hash)
