"""
Django Models para o domínio de Usuários.

Estes models são ADAPTERS - implementam a persistência para a
entidade definida em src/core/users/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio nem validação de formato
- E-mail, CPF e telefone são gravados na forma canônica
- A unicidade de e-mail e CPF é garantida também pelo banco
"""

from django.db import models
from django.utils import timezone


class UsuarioModel(models.Model):
    """
    Model Django para persistência de Usuários.
    
    Fields:
        id: UUID como primary key (gerado pelo repositório)
        nome: Nome completo
        email: E-mail normalizado (único)
        senha: Hash da senha
        cpf: 11 dígitos, sem pontuação (único)
        telefone: +55 seguido de 10 ou 11 dígitos, ou vazio
        criado_em: Timestamp de criação
        atualizado_em: Timestamp da última atualização (definido pela entidade)
    """
    
    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do usuário"
    )
    
    nome = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Nome completo"
    )
    
    email = models.CharField(
        max_length=254,
        unique=True,
        help_text="E-mail normalizado"
    )
    
    senha = models.CharField(
        max_length=128,
        help_text="Hash da senha"
    )
    
    cpf = models.CharField(
        max_length=11,
        unique=True,
        help_text="CPF sem pontuação"
    )
    
    telefone = models.CharField(
        max_length=14,
        blank=True,
        default='',
        help_text="Telefone na forma +55DDNNNNNNNNN"
    )
    
    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )
    
    # Sem auto_now: a entidade é dona do timestamp
    atualizado_em = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )
    
    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['nome', 'criado_em'], name='usuarios_nome_criado_idx'),
        ]
    
    def __str__(self):
        return f"[{self.id[:8]}] {self.nome} <{self.email}>"
    
    def __repr__(self):
        return f"<UsuarioModel id={self.id[:8]} email={self.email}>"
