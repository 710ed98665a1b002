"""
Django Forms para validação de entrada da API de Usuários.

Forms são DRIVING ADAPTERS que fazem as checagens de apresentação
(tamanhos, caracteres permitidos no nome, complexidade da senha)
antes de chamar os Use Cases. O Core revalida e-mail, CPF e
telefone por conta própria.
"""

import re

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

from src.core.shared.exceptions import InvalidFormatError
from src.core.users.dtos import (
    AtualizarUsuarioInputDTO,
    CriarUsuarioInputDTO,
    ListarUsuariosQueryDTO,
)
from src.core.users.value_objects import CPF


NOME_REGEX = r"^[a-zA-ZÀ-ÿ\s'.-]+$"
TELEFONE_REGEX = r"^(\+55\s?)?\(?[0-9]{2}\)?\s?[0-9]{4,5}-?[0-9]{4}$"

SENHA_MIN_LENGTH = 8
SENHA_MAX_LENGTH = 128


def validar_complexidade_senha(senha: str) -> None:
    """Exige minúscula, maiúscula, dígito e caractere especial."""
    regras = [
        (r"[a-z]", "uma letra minúscula"),
        (r"[A-Z]", "uma letra maiúscula"),
        (r"[0-9]", "um número"),
        (r"[^a-zA-Z0-9]", "um caractere especial"),
    ]
    faltando = [descricao for padrao, descricao in regras if not re.search(padrao, senha)]
    if faltando:
        raise ValidationError(
            "Senha deve conter pelo menos " + ", ".join(faltando),
            code="senha_fraca",
        )


def validar_cpf(valor: str) -> None:
    try:
        CPF(valor)
    except InvalidFormatError as e:
        raise ValidationError(e.message, code="cpf_invalido")


def _campo_nome(required: bool = True) -> forms.CharField:
    """
    Nome com letras (acentuadas inclusive), espaços e ' . -
    
    Na API o corpo passa pela sanitização antes do form, e ela remove
    o apóstrofo: "D'Ávila" chega aqui como "DÁvila". O ' continua
    aceito por quem valida o form diretamente, sem a sanitização.
    """
    return forms.CharField(
        label='Nome',
        min_length=2,
        max_length=100,
        required=required,
        validators=[
            RegexValidator(NOME_REGEX, 'Nome deve conter apenas letras, espaços e os caracteres \' . -'),
        ],
        error_messages={
            'required': 'Nome é obrigatório',
            'min_length': 'Nome deve ter pelo menos 2 caracteres',
            'max_length': 'Nome deve ter no máximo 100 caracteres',
        },
    )


def _campo_email(required: bool = True) -> forms.EmailField:
    return forms.EmailField(
        label='E-mail',
        max_length=254,
        required=required,
        error_messages={
            'required': 'E-mail é obrigatório',
            'invalid': 'E-mail inválido',
            'max_length': 'E-mail deve ter no máximo 254 caracteres',
        },
    )


def _campo_senha(required: bool = True) -> forms.CharField:
    return forms.CharField(
        label='Senha',
        min_length=SENHA_MIN_LENGTH,
        max_length=SENHA_MAX_LENGTH,
        required=required,
        strip=False,
        validators=[validar_complexidade_senha],
        error_messages={
            'required': 'Senha é obrigatória',
            'min_length': f'Senha deve ter pelo menos {SENHA_MIN_LENGTH} caracteres',
            'max_length': f'Senha deve ter no máximo {SENHA_MAX_LENGTH} caracteres',
        },
    )


def _campo_telefone() -> forms.CharField:
    return forms.CharField(
        label='Telefone',
        max_length=25,
        required=False,
        validators=[
            RegexValidator(TELEFONE_REGEX, 'Telefone deve estar no formato (11) 98765-4321'),
        ],
    )


class UsuarioCreateForm(forms.Form):
    """
    Form para cadastro de usuário.
    
    Valida dados antes de passar para CriarUsuarioService.
    """
    
    nome = _campo_nome()
    email = _campo_email()
    senha = _campo_senha()
    cpf = forms.CharField(
        label='CPF',
        max_length=14,
        validators=[validar_cpf],
        error_messages={'required': 'CPF é obrigatório'},
    )
    telefone = _campo_telefone()
    
    def to_input_dto(self) -> CriarUsuarioInputDTO:
        data = self.cleaned_data
        return CriarUsuarioInputDTO(
            nome=data['nome'],
            email=data['email'],
            senha=data['senha'],
            cpf=data['cpf'],
            telefone=data.get('telefone') or None,
        )


class UsuarioUpdateForm(forms.Form):
    """
    Form para atualização parcial.
    
    Só os campos presentes no corpo entram no DTO; telefone
    presente e vazio significa remover o telefone.
    """
    
    nome = _campo_nome(required=False)
    email = _campo_email(required=False)
    senha = _campo_senha(required=False)
    telefone = _campo_telefone()
    
    def clean(self):
        cleaned = super().clean()
        if not any(campo in self.data for campo in self.fields):
            raise ValidationError('Informe ao menos um campo para atualizar')
        return cleaned
    
    def to_input_dto(self, usuario_id: str) -> AtualizarUsuarioInputDTO:
        informados = {
            campo: self.cleaned_data.get(campo)
            for campo in self.fields
            if campo in self.data
        }
        
        # Campo vazio só tem significado para telefone
        for campo in ('nome', 'email', 'senha'):
            if informados.get(campo) == '':
                informados.pop(campo)
        
        if 'telefone' in informados:
            informados['telefone'] = informados['telefone'] or ''
        
        return AtualizarUsuarioInputDTO(usuario_id=usuario_id, **informados)


class UsuarioFiltroForm(forms.Form):
    """Form para filtros e paginação da listagem (query string)."""
    
    nome = forms.CharField(max_length=100, required=False)
    email = forms.CharField(max_length=254, required=False)
    cpf = forms.CharField(max_length=14, required=False, validators=[validar_cpf])
    criado_apos = forms.DateTimeField(required=False)
    criado_antes = forms.DateTimeField(required=False)
    
    pagina = forms.IntegerField(min_value=1, required=False)
    por_pagina = forms.IntegerField(min_value=1, max_value=100, required=False)
    
    ordenar_por = forms.ChoiceField(
        choices=[('nome', 'Nome'), ('email', 'E-mail'), ('criado_em', 'Data de criação')],
        required=False,
    )
    ordem = forms.ChoiceField(
        choices=[('asc', 'Crescente'), ('desc', 'Decrescente')],
        required=False,
    )
    
    def to_query_dto(self) -> ListarUsuariosQueryDTO:
        data = self.cleaned_data
        return ListarUsuariosQueryDTO(
            nome=data.get('nome') or None,
            email=data.get('email') or None,
            cpf=data.get('cpf') or None,
            criado_apos=data.get('criado_apos'),
            criado_antes=data.get('criado_antes'),
            ordenar_por=data.get('ordenar_por') or 'criado_em',
            ordem=data.get('ordem') or 'desc',
            pagina=data.get('pagina') or 1,
            por_pagina=data.get('por_pagina') or 10,
        )
