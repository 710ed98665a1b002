"""
Django Admin para o domínio de Usuários.

Somente leitura para campos de identidade canônica: alterações de
e-mail, CPF e senha devem passar pela API, que aplica as validações
do Core e publica os eventos.
"""

from django.contrib import admin

from src.core.users.value_objects import CPF, Telefone

from .models import UsuarioModel


@admin.register(UsuarioModel)
class UsuarioAdmin(admin.ModelAdmin):
    """Admin para UsuarioModel."""
    
    list_display = [
        'id_curto',
        'nome',
        'email',
        'cpf_formatado',
        'telefone_formatado',
        'criado_em',
    ]
    
    list_filter = ['criado_em']
    
    search_fields = ['id', 'nome', 'email', 'cpf']
    
    readonly_fields = ['id', 'email', 'cpf', 'senha', 'criado_em', 'atualizado_em']
    
    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'nome', 'email', 'cpf', 'telefone'],
        }),
        ('Credenciais', {
            'fields': ['senha'],
            'classes': ['collapse'],
        }),
        ('Timestamps', {
            'fields': ['criado_em', 'atualizado_em'],
            'classes': ['collapse'],
        }),
    ]
    
    ordering = ['-criado_em']
    
    date_hierarchy = 'criado_em'
    
    def id_curto(self, obj):
        return obj.id[:8] + '...'
    id_curto.short_description = 'ID'
    
    def cpf_formatado(self, obj):
        return CPF(obj.cpf).formatado
    cpf_formatado.short_description = 'CPF'
    
    def telefone_formatado(self, obj):
        return Telefone(obj.telefone).formatado
    telefone_formatado.short_description = 'Telefone'
    
    def has_add_permission(self, request):
        # Cadastro só pela API (hash de senha e eventos)
        return False
